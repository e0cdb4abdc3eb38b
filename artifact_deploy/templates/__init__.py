"""Built-in templates for artifact-deploy"""

from pathlib import Path

# Template directory path
TEMPLATES_DIR = Path(__file__).parent

DEPLOY_EXCLUDE_TEMPLATE = "deploy/deploy-exclude.txt"
DEPLOY_GITIGNORE_TEMPLATE = "deploy/gitignore"

__all__ = [
    'TEMPLATES_DIR',
    'DEPLOY_EXCLUDE_TEMPLATE',
    'DEPLOY_GITIGNORE_TEMPLATE',
]
