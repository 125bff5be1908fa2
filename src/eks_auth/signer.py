"""
Identity signers for STS GetCallerIdentity requests.

An identity signer produces a pre-signed GetCallerIdentity URL bound to
the caller's IAM credentials. The request is never sent; the URL is the
material the EKS token is made from.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import MintingError, SigningFailed

logger = logging.getLogger(__name__)

# Hook invoked on the request right before it is signed
BeforeSignHook = Callable[[Any], None]

# Request parameter and context key carrying the per-call hook
_HOOK_PARAM = "BeforeSignHook"
_HOOK_CONTEXT_KEY = "eks_auth_before_sign"


class IdentitySigner(ABC):
    """Abstract capability for pre-signing GetCallerIdentity.

    Example:
        >>> class MySigner(IdentitySigner):
        ...     def presign_caller_identity(self, before_sign, expires_in):
        ...         return "https://sts.amazonaws.com/?Action=GetCallerIdentity&..."
    """

    @abstractmethod
    def presign_caller_identity(self, before_sign: BeforeSignHook, expires_in: int) -> str:
        """Pre-sign a parameterless GetCallerIdentity request.

        Args:
            before_sign: Called with the request after it is built and
                before it is signed
            expires_in: Validity of the signature in seconds

        Returns:
            Fully qualified pre-signed URL

        Raises:
            SigningFailed: If the request cannot be signed
        """
        pass

    def get_description(self) -> str:
        """Get human-readable description of this signer."""
        return self.__class__.__name__


def _move_hook_to_context(params: dict, context: dict, **kwargs: Any) -> None:
    if _HOOK_PARAM in params:
        context[_HOOK_CONTEXT_KEY] = params.pop(_HOOK_PARAM)


def _run_before_sign_hook(request: Any, **kwargs: Any) -> None:
    hook = request.context.get(_HOOK_CONTEXT_KEY)
    if hook is not None:
        hook(request)


class STSIdentitySigner(IdentitySigner):
    """Pre-sign GetCallerIdentity with a boto3 STS client.

    The hook travels with each presign call through the request context,
    so a single client can sign for several clusters at once. Handlers
    are registered with fixed ids and registering twice is a no-op.

    Args:
        sts_client: boto3 STS client carrying the IAM credentials

    Example:
        >>> signer = STSIdentitySigner(boto3.client("sts", region_name="us-east-1"))
        >>> url = signer.presign_caller_identity(lambda request: None, 60)
    """

    def __init__(self, sts_client: Any) -> None:
        self.sts_client = sts_client
        events = sts_client.meta.events
        events.register(
            "provide-client-params.sts.GetCallerIdentity",
            _move_hook_to_context,
            unique_id="eks-auth-provide-hook",
        )
        events.register(
            "before-sign.sts.GetCallerIdentity",
            _run_before_sign_hook,
            unique_id="eks-auth-before-sign",
        )

    def presign_caller_identity(self, before_sign: BeforeSignHook, expires_in: int) -> str:
        try:
            return self.sts_client.generate_presigned_url(
                "get_caller_identity",
                Params={_HOOK_PARAM: before_sign},
                ExpiresIn=expires_in,
                HttpMethod="GET",
            )
        except MintingError:
            raise
        except (BotoCoreError, ClientError) as e:
            raise SigningFailed(
                "Failed to generate STS request url",
                f"Error: {type(e).__name__}: {e}"
            ) from e

    def get_description(self) -> str:
        return f"STS ({self.sts_client.meta.region_name})"
