"""Content block registry.

Maps content block type tags to the template fragments that render them.
The set of types is closed: adding a type means adding an enum member,
its fragment file, and a case below.
"""

from enum import StrEnum


class ComponentType(StrEnum):
    """Known content block types."""

    ACCORDION_CARD = "AccordionCard"
    ACCORDION_FORM_GROUP = "AccordionFormGroup"
    ACCORDION_FORM_LABEL = "AccordionFormLabel"


def fragment_for(component: ComponentType) -> str:
    """Return the template name of a component's fragment."""
    match component:
        case ComponentType.ACCORDION_CARD:
            return "components/accordion_card.html"
        case ComponentType.ACCORDION_FORM_GROUP:
            return "components/accordion_form_group.html"
        case ComponentType.ACCORDION_FORM_LABEL:
            return "components/accordion_form_label.html"


def component_template(block_type: str) -> str | None:
    """Resolve a block type tag to its fragment template name.

    Matching is exact and case-sensitive.

    Args:
        block_type: The ``type`` tag of a content block

    Returns:
        Template name, or None for an unsupported type
    """
    try:
        component = ComponentType(block_type)
    except ValueError:
        return None
    return fragment_for(component)


def registered_fragments() -> list[str]:
    """Template names of every registered fragment."""
    return [fragment_for(component) for component in ComponentType]
