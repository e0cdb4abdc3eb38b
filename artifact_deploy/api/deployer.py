"""Deployer API for artifact deployment"""

from pathlib import Path
from typing import Optional, Union

from ..models import DeployConfig, DeployOptions, DeployResult
from ..services import (
    BuildOperations,
    ConfigService,
    DeployService,
    NonInteractivePrompter,
    Prompter,
)


class Deployer:
    """Deployer class for artifact deploy operations"""

    def __init__(self,
                 config: Optional[DeployConfig] = None,
                 config_path: Union[str, Path, None] = None,
                 operations: Optional[BuildOperations] = None,
                 prompter: Optional[Prompter] = None):
        """
        Initialize deployer

        Args:
            config: Configuration snapshot; loaded from config_path (or
                discovered from the working directory) when omitted
            config_path: Path to the project configuration file
            operations: External build operations
            prompter: Source of interactive answers
        """
        if config is None:
            service = ConfigService(config_path) if config_path else ConfigService.discover()
            config = service.load_config()

        self.config = config
        self.service = DeployService(
            config,
            operations=operations,
            prompter=prompter or NonInteractivePrompter()
        )

    def deploy(self, **options) -> DeployResult:
        """
        Build, commit and push the artifact

        Args:
            **options: DeployOptions fields

        Returns:
            DeployResult: Deployment result
        """
        return self.service.deploy(DeployOptions(**options))

    def build(self,
              tag_name: Optional[str] = None,
              ignore_platform_reqs: bool = False) -> DeployResult:
        """
        Build the artifact without committing or pushing

        Returns:
            DeployResult: Build result
        """
        return self.service.build(tag_name=tag_name, ignore_platform_reqs=ignore_platform_reqs)


def deploy(branch: Optional[str] = None,
           tag: Optional[str] = None,
           commit_message: Optional[str] = None,
           config_path: Union[str, Path, None] = None,
           **options) -> DeployResult:
    """
    Deploy the artifact to a branch or a tag

    This is a convenience function that creates a Deployer instance
    and runs the pipeline non-interactively.

    Args:
        branch: Artifact branch name
        tag: Tag name; selects the tag flow
        commit_message: Artifact commit message
        config_path: Path to the project configuration file
        **options: ignore_dirty, dry_run, ignore_platform_reqs

    Returns:
        DeployResult: Deployment result

    Raises:
        ValueError: If both branch and tag are specified
    """
    if branch and tag:
        raise ValueError("Cannot specify both branch and tag")

    deployer = Deployer(config_path=config_path)
    return deployer.deploy(
        branch_name=branch,
        tag_name=tag,
        commit_message=commit_message,
        interactive=False,
        **options
    )
