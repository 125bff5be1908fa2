"""
Configuration dataclass for EKS authentication.

This module provides the AuthConfig dataclass that centralizes the
options needed to mint credentials for an EKS cluster.
"""

import os
import warnings
from dataclasses import dataclass

from .exceptions import ConfigurationError

# Environment variable keys
ENV_KEY_CLUSTER = "EKS_AUTH_CLUSTER"
ENV_KEY_REGION = "EKS_AUTH_REGION"


@dataclass
class AuthConfig:
    """Configuration for EKS IAM authentication.

    Holds the cluster to authenticate against and the region its control
    plane lives in. Values can be passed explicitly or read from the
    environment.

    Args:
        cluster: Name of the EKS cluster
        region: AWS region of the cluster (boto3 default region if None)
        use_env: Take cluster and region from EKS_AUTH_CLUSTER and
            EKS_AUTH_REGION, overriding explicit values
        timeout: Connect and read timeout in seconds for AWS API calls
        verify_ssl: Verify the cluster's TLS certificate (WARNING: only
            disable for development)

    Example:
        >>> config = AuthConfig(cluster="prod-cluster", region="us-east-1")
        >>>
        >>> # Inside a Lambda function configured through the environment
        >>> config = AuthConfig(use_env=True)
    """

    cluster: str | None = None
    region: str | None = None
    use_env: bool = False
    timeout: float = 10.0
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization.

        Raises:
            ConfigurationError: If configuration is invalid or incomplete
        """
        self._load_from_environment()

        if not self.cluster:
            raise ConfigurationError(
                "EKS authentication requires 'cluster' parameter",
                f"Provide cluster or set {ENV_KEY_CLUSTER} environment variable"
            )

        if self.timeout <= 0:
            raise ConfigurationError(
                f"Invalid timeout: {self.timeout}",
                "Timeout must be a positive number of seconds"
            )

        if not self.verify_ssl:
            warnings.warn(
                "TLS/SSL verification is disabled (verify_ssl=False). "
                "This is insecure and should only be used in development environments. "
                "Your bearer token may be exposed to man-in-the-middle attacks.",
                SecurityWarning,
                stacklevel=2
            )

    def _load_from_environment(self) -> None:
        """Load configuration from environment variables.

        With use_env set, EKS_AUTH_CLUSTER and EKS_AUTH_REGION replace any
        explicit values, matching how the Lambda adapter is configured.
        Otherwise they only fill parameters that were not set.

        Environment Variables:
            EKS_AUTH_CLUSTER: EKS cluster name
            EKS_AUTH_REGION: AWS region of the cluster
        """
        if self.use_env:
            self.cluster = os.getenv(ENV_KEY_CLUSTER)
            self.region = os.getenv(ENV_KEY_REGION)
            return

        if not self.cluster:
            self.cluster = os.getenv(ENV_KEY_CLUSTER)

        if not self.region:
            self.region = os.getenv(ENV_KEY_REGION)

    def __repr__(self) -> str:
        config_dict = {
            "cluster": self.cluster,
            "region": self.region,
            "use_env": self.use_env,
            "timeout": self.timeout,
            "verify_ssl": self.verify_ssl,
        }

        params = ", ".join(f"{k}={v!r}" for k, v in config_dict.items() if v is not None)
        return f"AuthConfig({params})"

    @classmethod
    def from_dict(cls, config_dict: dict) -> "AuthConfig":
        """Create AuthConfig from dictionary.

        This is useful for loading configuration from JSON or YAML files,
        or straight from a Lambda event.

        Args:
            config_dict: Dictionary containing configuration parameters

        Returns:
            AuthConfig instance

        Example:
            >>> config = AuthConfig.from_dict({"cluster": "prod-cluster", "region": "eu-west-1"})
        """
        # Filter out unknown keys to avoid TypeError
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_dict = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered_dict)


class SecurityWarning(UserWarning):
    """Warning category for security-related issues.

    This custom warning category allows users to filter security warnings
    separately from other warnings if desired.
    """
    pass
