"""Change Classifier - 완료 상태 변경 레코드 필터."""

from checklist_progress.domain.models import ChangeRecord


class ChangeClassifier:
    """
    Pure predicate over change records.

    A record is relevant iff its attribute equals, or textually contains,
    the completion property identifier.
    """

    def is_relevant(self, record: ChangeRecord, target_property_pattern: str) -> bool:
        attribute = getattr(record, "attribute", None)
        if not isinstance(attribute, str) or not target_property_pattern:
            return False
        return attribute == target_property_pattern or target_property_pattern in attribute

    def filter(self, records, target_property_pattern: str) -> list[ChangeRecord]:
        return [record for record in records if self.is_relevant(record, target_property_pattern)]
