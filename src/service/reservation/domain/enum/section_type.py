from enum import StrEnum


class SectionType(StrEnum):
    CENTER = 'center'
    LEFT = 'left'
    RIGHT = 'right'
    UNKNOWN = 'unknown'

    @classmethod
    def from_section_name(cls, name: str) -> 'SectionType':
        """Detect section type from its display name, e.g. 'Orchestra Center' -> CENTER"""
        lowered = (name or '').lower()
        for section_type in (cls.CENTER, cls.LEFT, cls.RIGHT):
            if section_type.value in lowered:
                return section_type
        return cls.UNKNOWN
