"""Most recent recognition result per mode, kept for display."""

from recognizer.schemas import Mode, RecordModel


def present(record: RecordModel) -> dict:
    """Render a record as the camelCase JSON object clients receive."""
    return record.model_dump(mode="json", by_alias=True)


class ResultCache:
    def __init__(self):
        self._results: dict[Mode, RecordModel] = {}

    def save(self, mode: Mode | str, record: RecordModel) -> None:
        self._results[Mode.parse(mode)] = record

    def get(self, mode: Mode | str) -> RecordModel | None:
        return self._results.get(Mode.parse(mode))

    def clear(self) -> None:
        """Drop results for every mode, e.g. when a new image is uploaded."""
        self._results.clear()
