from pathlib import Path


class ContextAppError(Exception):
    """Base user-facing application error."""


class ContextFileError(ContextAppError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class ProjectRootError(ContextFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Project root is not an existing directory")


class InvalidSettingsError(ContextFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid settings ({detail})")


class OutputWriteError(ContextFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Failed to write context file ({detail})")


class InvalidRuleError(ContextAppError):
    def __init__(self, pattern: str, message: str) -> None:
        self.pattern = pattern
        super().__init__(f"{message}: {pattern!r}")


class InvalidRequestError(ContextAppError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid request ({detail})")
