from typing import Final


MIN_CONTENT_LENGTH: Final[int] = 100
MAX_CONTENT_LENGTH: Final[int] = 50_000

MAX_QUALITY_SCORE: Final[int] = 10
MAX_CONTENT_TAGS: Final[int] = 10
BLUEPRINT_ID_MAX_LENGTH: Final[int] = 50

DEFAULT_BLUEPRINT_VERSION: Final[str] = "1.0.0"
DEFAULT_AUTHOR: Final[str] = "Community Contributor"
GENERIC_FRAMEWORK: Final[str] = "generic"
DEFAULT_LANGUAGE: Final[str] = "javascript"

HUB_SHARE_TTL_HOURS: Final[int] = 24

GITHUB_TOKEN_ENV: Final[tuple[str, ...]] = ("GITHUB_TOKEN", "VDK_GITHUB_TOKEN")
GITHUB_API_URL: Final[str] = "https://api.github.com"
GITHUB_REPO_OWNER: Final[str] = "entro314-labs"
GITHUB_REPO_NAME: Final[str] = "VDK-Blueprints"
GITHUB_BASE_BRANCH: Final[str] = "main"
GITHUB_TOKEN_URL: Final[str] = "https://github.com/settings/tokens"
GITHUB_TOKEN_SCOPES: Final[str] = "public_repo, read:user"
COMMUNITY_DIRNAME: Final[str] = "community"

HUB_URL: Final[str] = "https://vdk.tools"
USER_AGENT: Final[str] = "vdk-publish"

PROJECT_IGNORED_DIRS: Final[tuple[str, ...]] = (
    ".git",
    "node_modules",
    ".venv",
    "venv",
    "__pycache__",
    "dist",
    "build",
)

PLATFORM_CLAUDE: Final[str] = "claude-code-cli"
PLATFORM_CURSOR: Final[str] = "cursor"
PLATFORM_WINDSURF: Final[str] = "windsurf"
PLATFORM_COPILOT: Final[str] = "github-copilot"
