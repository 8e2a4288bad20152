import os
from typing import Optional
from dotenv import load_dotenv

from routing.domains import ConfigurationError

# Load environment variables from a .env file
load_dotenv()

ACCESS_CONTROL_MODES = ("oac", "oai")
_TRUE_VALUES = ("true", "1", "yes")
_FALSE_VALUES = ("false", "0", "no")


class DeployConfig:
    """
    Stores the deployment configuration for the static site stacks.
    Built once at the entry point and passed explicitly to every consumer.
    """
    def __init__(
        self,
        stack_name: str,
        project_root_dir: str,
        dist_folder: str = "dist",
        custom_domain: Optional[str] = None,
        domain_zone: Optional[str] = None,
        is_spa: bool = False,
        apex_override: Optional[bool] = None,
        access_control: str = "oac",
        account: Optional[str] = None,
        region: Optional[str] = None
    ):
        self.stack_name = stack_name
        self.project_root_dir = project_root_dir
        self.dist_folder = dist_folder
        self.custom_domain = custom_domain
        self.domain_zone = domain_zone
        self.is_spa = is_spa
        self.apex_override = apex_override
        self.access_control = access_control
        self.account = account
        self.region = region

    @property
    def dist_path(self) -> str:
        return os.path.abspath(os.path.join(self.project_root_dir, self.dist_folder))


def get_optional_env(key: str, scope=None) -> Optional[str]:
    """
    CDK context (cdk deploy -c key=value) wins over the environment.
    """
    if scope is not None:
        value = scope.node.try_get_context(key)
        if value is not None:
            return str(value)
    value = os.getenv(key)
    return value if value else None


def get_required_env(key: str, scope=None) -> str:
    """
    Retrieves a required setting or raises a ConfigurationError if missing.
    """
    value = get_optional_env(key, scope)
    if not value:
        raise ConfigurationError(f"❌ MISSING CONFIG: Required environment variable '{key}' not found in .env")
    return value


def get_bool_env(key: str, default: Optional[bool] = None, scope=None) -> Optional[bool]:
    value = get_optional_env(key, scope)
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"❌ INVALID CONFIG: '{key}' must be a boolean, got '{value}'")


def validate_config(config: DeployConfig) -> DeployConfig:
    if not os.path.isdir(config.project_root_dir):
        raise ConfigurationError(
            f"❌ INVALID CONFIG: Project root directory '{config.project_root_dir}' does not exist"
        )
    if not os.path.isdir(config.dist_path):
        raise ConfigurationError(
            f"❌ INVALID CONFIG: Build output '{config.dist_path}' does not exist, run the build first"
        )
    if config.access_control not in ACCESS_CONTROL_MODES:
        raise ConfigurationError(
            f"❌ INVALID CONFIG: 'accessControl' must be one of {', '.join(ACCESS_CONTROL_MODES)}, "
            f"got '{config.access_control}'"
        )
    return config


def get_config(scope=None) -> DeployConfig:
    """
    Factory function to generate the DeployConfig from .env and CDK context.
    Usage: cdk deploy -c customDomain=example.com
    """
    stack_name = get_required_env("STACK_NAME", scope)
    print(f"🔍 Initializing static site infrastructure for stack: {stack_name}")

    # Load Mandatory Variables
    project_root_dir = get_required_env("hereyaProjectRootDir", scope)

    # Load Optional Variables
    config = DeployConfig(
        stack_name=stack_name,
        project_root_dir=project_root_dir,
        dist_folder=get_optional_env("distFolder", scope) or "dist",
        custom_domain=get_optional_env("customDomain", scope),
        domain_zone=get_optional_env("domainZone", scope),
        is_spa=get_bool_env("isSpa", False, scope),
        apex_override=get_bool_env("isApexDomain", None, scope),
        access_control=(get_optional_env("accessControl", scope) or "oac").lower(),
        account=os.getenv("CDK_DEFAULT_ACCOUNT"),
        region=os.getenv("CDK_DEFAULT_REGION")
    )
    return validate_config(config)
