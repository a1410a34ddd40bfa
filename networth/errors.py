class NetWorthError(Exception):
    """Base class for every error raised by the networth package."""


class InvalidInputError(NetWorthError, ValueError):
    """A monetary amount, duration or date could not be accepted."""


class InvalidRecordError(InvalidInputError):
    """An asset record failed validation during aggregation or storage.

    ``details`` is the same dict a ``Left`` from ``validate_asset`` carries:
    ``error`` (machine code), ``message`` and ``asset_id``.
    """

    def __init__(self, details: dict):
        super().__init__(details.get("message", "invalid record"))
        self.details = details

    @property
    def code(self) -> str:
        return self.details.get("error", "invalid_record")


class AssetNotFoundError(NetWorthError, KeyError):
    def __init__(self, asset_id: str):
        super().__init__(asset_id)
        self.asset_id = asset_id

    def __str__(self) -> str:
        return f"Asset with ID {self.asset_id} does not exist"
