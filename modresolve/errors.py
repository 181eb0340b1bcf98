"""Exception hierarchy for module resolution."""


class ModuleResolutionError(Exception):
    """Base class for every error raised while resolving a module id."""


class ResolveError(ModuleResolutionError):
    """Terminal failure reported by the resolution engine.

    Attributes:
        code: Machine readable reason, one of MODULE_NOT_FOUND,
            INVALID_PACKAGE_MAIN or INCORRECT_PACKAGE_MAIN
    """

    MODULE_NOT_FOUND = "MODULE_NOT_FOUND"
    INVALID_PACKAGE_MAIN = "INVALID_PACKAGE_MAIN"
    INCORRECT_PACKAGE_MAIN = "INCORRECT_PACKAGE_MAIN"

    def __init__(self, message: str, code: str = MODULE_NOT_FOUND):
        super().__init__(message)
        self.code = code


class ModuleIdNotFoundError(ModuleResolutionError):
    """The engine reported success but produced no usable path."""

    def __init__(self, module_id: str):
        super().__init__(f"Unable to resolve module: {module_id}")
        self.module_id = module_id


class FileReadError(ModuleResolutionError):
    """A probed file had no readable content."""

    def __init__(self, path: str):
        super().__init__(f"readFile not found: {path}")
        self.path = path


class CallbackContractError(ModuleResolutionError):
    """A bridge method finished without completing its callback."""
