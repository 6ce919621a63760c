from typing import Final


APP_NAME: Final[str] = "code-context"

OUTPUT_FILENAME: Final[str] = "ProjectContext.txt"
GITIGNORE_FILENAME: Final[str] = ".gitignore"
PROJECT_SETTINGS_FILENAME: Final[str] = ".code-context.yaml"
USER_SETTINGS_FILENAME: Final[str] = "settings.yaml"
SESSIONS_DIRNAME: Final[str] = "sessions"

GIT_DIR_PATTERN: Final[str] = ".git/"
MATCH_ALL_PATTERN: Final[str] = "*"

FOLDER_STRUCTURE_HEADER: Final[str] = "--- Folder Structure ---"
BINARY_PLACEHOLDER: Final[str] = "[Binary file detected - content excluded]"
READ_ERROR_PLACEHOLDER: Final[str] = "[Error reading file: {message}]"
INDENT: Final[str] = "  "

BINARY_SNIFF_BYTES: Final[int] = 4096
SEARCH_MATCH_LIMIT: Final[int] = 500

BINARY_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp",
        ".pdf", ".exe", ".dll", ".so", ".dylib", ".bin",
        ".zip", ".tar", ".gz", ".7z", ".rar",
        ".mp3", ".mp4", ".wav", ".avi", ".mov",
        ".eot", ".ttf", ".woff", ".woff2",
        ".pyc", ".class", ".jar",
    }
)

DEFAULT_EXCLUDE_DIRS: Final[tuple[str, ...]] = (
    "node_modules",
    "vendor",
    ".next",
    ".vscode",
)
DEFAULT_EXCLUDE_FILES: Final[tuple[str, ...]] = ("package-lock.json",)
DEFAULT_SEARCH_EXCLUDE: Final[tuple[str, ...]] = (GIT_DIR_PATTERN,)

TEMPLATES_API_URL: Final[str] = "https://api.github.com/repos/github/gitignore/contents/"
TEMPLATE_RAW_URL: Final[str] = (
    "https://raw.githubusercontent.com/github/gitignore/main/{name}.gitignore"
)
TEMPLATE_SUFFIX: Final[str] = ".gitignore"

PROJECT_TYPE_MARKERS: Final[tuple[tuple[str, str], ...]] = (
    ("Node", "package.json"),
    ("Python", "requirements.txt"),
    ("Go", "go.mod"),
    ("Rust", "Cargo.toml"),
    ("Java", "pom.xml"),
    ("Maven", "pom.xml"),
)
