from pydantic import BaseModel


class CsvExport(BaseModel):
    """A rendered CSV document and the filename it should be served under."""

    filename: str
    content: str
