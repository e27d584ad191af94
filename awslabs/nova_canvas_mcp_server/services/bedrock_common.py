# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Common utilities for AWS Bedrock access.

This module provides the Bedrock runtime client factory and the model
invocation wrapper with AWS error classification.
"""

import asyncio
import boto3
import json
import os
from awslabs.nova_canvas_mcp_server.consts import (
    BEDROCK_CONNECT_TIMEOUT,
    BEDROCK_MAX_POOL_CONNECTIONS,
    BEDROCK_MAX_RETRY_ATTEMPTS,
    BEDROCK_READ_TIMEOUT,
    BEDROCK_RETRY_MODE,
    DEFAULT_AWS_PROFILE,
    DEFAULT_AWS_REGION,
)
from awslabs.nova_canvas_mcp_server.errors import UpstreamFailureError
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError
from loguru import logger
from typing import TYPE_CHECKING, Any, Dict, Optional


if TYPE_CHECKING:
    from mypy_boto3_bedrock_runtime import BedrockRuntimeClient
else:
    BedrockRuntimeClient = object


def resolve_aws_region() -> str:
    """Return the Bedrock region from AWS_REGION, then AWS_DEFAULT_REGION."""
    return (
        os.environ.get('AWS_REGION')
        or os.environ.get('AWS_DEFAULT_REGION')
        or DEFAULT_AWS_REGION
    )


def create_bedrock_runtime_client(
    region_name: Optional[str] = None,
    profile_name: Optional[str] = None,
) -> BedrockRuntimeClient:
    """Create the Bedrock runtime client used for the lifetime of the process.

    Credentials are resolved once: first from the named profile, then from the
    default boto3 provider chain (environment variables, container and
    instance metadata, SSO).

    Args:
        region_name: AWS region. Defaults to the environment, then us-east-1.
        profile_name: AWS profile. Defaults to AWS_PROFILE, then 'default'.

    Returns:
        A bedrock-runtime client configured with adaptive retries and timeouts.

    Raises:
        NoCredentialsError: If neither the profile nor the provider chain yields credentials.
    """
    region = region_name or resolve_aws_region()
    profile = profile_name or os.environ.get('AWS_PROFILE') or DEFAULT_AWS_PROFILE

    # Reference: https://docs.aws.amazon.com/prescriptive-guidance/latest/cloud-design-patterns/retry-backoff.html
    retry_config = Config(
        retries={
            'max_attempts': BEDROCK_MAX_RETRY_ATTEMPTS,
            'mode': BEDROCK_RETRY_MODE,
        },
        connect_timeout=BEDROCK_CONNECT_TIMEOUT,
        read_timeout=BEDROCK_READ_TIMEOUT,
        max_pool_connections=BEDROCK_MAX_POOL_CONNECTIONS,
    )

    try:
        session = boto3.Session(profile_name=profile, region_name=region)
        if session.get_credentials() is None:
            raise NoCredentialsError()
        logger.info(
            f'Loaded credentials from AWS profile: {profile}',
            extra={'region': region, 'profile': profile}
        )
    except BotoCoreError as e:
        logger.warning(
            f'Failed to load profile credentials, falling back to provider chain: {str(e)}',
            extra={'region': region, 'profile': profile}
        )
        session = boto3.Session(region_name=region)
        if session.get_credentials() is None:
            logger.error(
                'Failed to load credentials from provider chain',
                extra={'region': region}
            )
            raise NoCredentialsError()
        logger.info(
            'Loaded credentials from provider chain',
            extra={'region': region}
        )

    return session.client('bedrock-runtime', config=retry_config)


async def invoke_bedrock_model(
    model_id: str,
    request_body: Dict[str, Any],
    bedrock_client: BedrockRuntimeClient
) -> Dict[str, Any]:
    """Invoke a Bedrock model with error classification.

    The blocking boto3 call runs in a worker thread so that concurrent tool
    calls keep being served. Retries are left to the client configuration.

    Args:
        model_id: The Bedrock model ID to invoke.
        request_body: Dictionary containing the request parameters.
        bedrock_client: BedrockRuntimeClient object with retry configuration.

    Returns:
        The decoded JSON response body.

    Raises:
        UpstreamFailureError: On any failure of the call itself.
    """
    logger.debug(
        f'Invoking Bedrock model: {model_id}',
        extra={
            'model_id': model_id,
            'request_keys': list(request_body.keys())
        }
    )

    try:
        request = json.dumps(request_body)

        logger.info(f'Sending request to Bedrock model: {model_id}')
        response = await asyncio.to_thread(
            bedrock_client.invoke_model,
            modelId=model_id,
            body=request,
            contentType='application/json',
            accept='application/json',
        )

        result = json.loads(response['body'].read().decode('utf-8'))
        logger.info(
            f'Bedrock API call successful for model: {model_id}',
            extra={'model_id': model_id, 'images_count': len(result.get('images') or [])}
        )
        return result

    except ClientError as e:
        error_code = e.response['Error']['Code']
        error_message = e.response['Error']['Message']

        logger.error(
            f'Bedrock API error: {error_code}',
            extra={
                'model_id': model_id,
                'error_code': error_code,
                'error_message': error_message
            }
        )

        if error_code == 'ValidationException':
            raise UpstreamFailureError(
                message=f'Invalid parameters: {error_message}',
                error_code=error_code,
                retryable=False
            )
        elif error_code == 'AccessDeniedException':
            raise UpstreamFailureError(
                message=f'Access denied. Check IAM permissions for model {model_id}. '
                        f"Ensure you have 'bedrock:InvokeModel' permission and model access is enabled.",
                error_code=error_code,
                retryable=False
            )
        elif error_code == 'ThrottlingException':
            raise UpstreamFailureError(
                message='Rate limit exceeded. AWS SDK will automatically retry with exponential backoff. '
                        'If this persists, consider requesting a quota increase.',
                error_code=error_code,
                retryable=True
            )
        elif error_code == 'ModelNotReadyException':
            raise UpstreamFailureError(
                message=f'Model {model_id} is not ready. Please try again in a few moments.',
                error_code=error_code,
                retryable=True
            )
        elif error_code == 'ServiceUnavailableException':
            raise UpstreamFailureError(
                message='Bedrock service is temporarily unavailable. AWS SDK will automatically retry.',
                error_code=error_code,
                retryable=True
            )
        elif error_code == 'InternalServerException':
            raise UpstreamFailureError(
                message='Internal server error. AWS SDK will automatically retry.',
                error_code=error_code,
                retryable=True
            )
        else:
            logger.exception(
                f'Unexpected AWS error: {error_code}',
                extra={'model_id': model_id, 'error_code': error_code}
            )
            raise UpstreamFailureError(
                message=error_message,
                error_code=error_code,
                retryable=False
            )

    except Exception as e:
        logger.exception(
            f'Unexpected error invoking Bedrock model: {model_id}',
            extra={'model_id': model_id}
        )
        raise UpstreamFailureError(
            message=str(e),
            error_code='UnexpectedError',
            retryable=False
        )
