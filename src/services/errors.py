# exceptions raised by the services package, caught and reported by the views
from typing import List


class SheetImportError(ValueError):
    """
    Base class for every failure that aborts a product import.
    The message is meant to be shown to the user as-is.
    """


class WorkbookReadError(SheetImportError):
    pass


class EmptySheetError(SheetImportError):
    def __init__(self, message: str = "Excel file is empty or missing data."):
        super().__init__(message)


class ColumnsNotFoundError(SheetImportError):
    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(
            "Required columns (Code, Name, Price) not found or mislabeled: "
            + ", ".join(missing)
            + "."
        )


class RowValidationError(SheetImportError):
    def __init__(self, row_number: int, field: str):
        self.row_number = row_number
        self.field = field
        super().__init__(f"Row {row_number}: {field} is missing.")


class ValidationError(ValueError):
    """
    A user input that blocks an action. `field` names the offending input.
    """

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class ProductValidationError(ValidationError):
    pass


class ExportValidationError(ValidationError):
    pass


class CredentialsError(ValueError):
    pass
