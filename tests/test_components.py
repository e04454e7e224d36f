"""Tests for the content block registry."""

import pytest
from jsonsite.assets import get_templates_dir
from jsonsite.core.components import ComponentType, component_template, registered_fragments


class TestComponentTemplate:
    """Tests for component_template()."""

    @pytest.mark.parametrize(
        ("block_type", "fragment"),
        [
            ("AccordionCard", "components/accordion_card.html"),
            ("AccordionFormGroup", "components/accordion_form_group.html"),
            ("AccordionFormLabel", "components/accordion_form_label.html"),
        ],
    )
    def test__known_type__returns_fragment(self, block_type: str, fragment: str) -> None:
        """Known types resolve to their fragment template."""
        assert component_template(block_type) == fragment

    @pytest.mark.parametrize("block_type", ["Foo", "accordioncard", "", "AccordionCard "])
    def test__unknown_type__returns_none(self, block_type: str) -> None:
        """Matching is exact; anything else is unsupported."""
        assert component_template(block_type) is None


class TestRegisteredFragments:
    """Tests for registered_fragments()."""

    def test__one_fragment_per_type(self) -> None:
        """Every component type has exactly one fragment."""
        assert len(registered_fragments()) == len(ComponentType)
        assert len(set(registered_fragments())) == len(ComponentType)

    def test__fragments_are_bundled(self) -> None:
        """Bundled templates ship every registered fragment."""
        templates_dir = get_templates_dir()

        for fragment in registered_fragments():
            assert (templates_dir / fragment).is_file(), fragment
