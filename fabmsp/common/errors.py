class FabMspError(Exception):
    """Base class of every error raised by fabmsp."""


class MissingPrerequisiteError(FabMspError):
    """A source path an assembler reads from does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Missing prerequisite: {path} does not exist")


class ArtifactNotFoundError(FabMspError):
    """A folder holds no candidate artifact to select from."""

    def __init__(self, folder):
        self.folder = folder
        super().__init__(f"No artifact found in folder {folder}")


class EnvNotInitializedError(FabMspError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Missing env file {path}: run config init first")


class PackageIdNotFoundError(FabMspError):
    def __init__(self, label):
        self.label = label
        super().__init__(
            f"Package id for chaincode {label} not found: "
            "install the chaincode or query its package id first"
        )
