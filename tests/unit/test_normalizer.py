"""Tests for identifier normalization."""

import pytest

from tokensmith.core.errors import DuplicateKeyError, MalformedSourceError
from tokensmith.core.graph import build_graph, build_graphs
from tokensmith.core.ir import Theme
from tokensmith.core.manifest import DEFAULT_NAMESPACES
from tokensmith.core.normalizer import (
    CONCATENATED,
    HYPHENATED,
    concatenated_name,
    hyphenated_name,
    normalize_theme,
    normalize_themes,
    segment_words,
)
from tokensmith.core.resolver import resolve_graphs, resolve_theme


@pytest.mark.parametrize(
    "segment,words",
    [
        ("surfacePrimary", ["surface", "primary"]),
        ("bg-default", ["bg", "default"]),
        ("HTTPStatus", ["http", "status"]),
        ("500", ["500"]),
        ("Font Size", ["font", "size"]),
        ("h1", ["h1"]),
    ],
)
def test_segment_words(segment, words):
    assert segment_words(segment) == words


class TestNames:
    def test_category_is_replaced_by_namespace(self):
        path = ("Colors", "primary", "500")

        assert hyphenated_name(path, DEFAULT_NAMESPACES) == "color-primary-500"
        assert concatenated_name(path, DEFAULT_NAMESPACES) == "colorPrimary500"

    def test_camel_case_segments(self):
        path = ("Semantic", "surface", "surfacePrimary")

        assert hyphenated_name(path, DEFAULT_NAMESPACES) == "semantic-surface-surface-primary"
        assert concatenated_name(path, DEFAULT_NAMESPACES) == "semanticSurfaceSurfacePrimary"

    def test_unknown_category_is_kept(self):
        path = ("Motion", "durationFast")

        assert hyphenated_name(path, DEFAULT_NAMESPACES) == "motion-duration-fast"
        assert concatenated_name(path, DEFAULT_NAMESPACES) == "motionDurationFast"

    def test_segment_without_usable_characters(self):
        with pytest.raises(MalformedSourceError, match="no characters usable"):
            hyphenated_name(("Colors", "--"), DEFAULT_NAMESPACES)


def _resolved(make_document, base):
    return resolve_theme(build_graph(make_document(base), Theme.BASE))


class TestNormalizeTheme:
    def test_names_every_path(self, make_document):
        resolved = _resolved(
            make_document,
            {
                "Colors": {"primary": {"500": {"$type": "color", "$value": "#0EA5E9"}}},
                "Sizes": {"4": {"$type": "dimension", "$value": 4}},
            },
        )

        names = normalize_theme(resolved, DEFAULT_NAMESPACES)

        assert names["Colors.primary.500"].css_name == "color-primary-500"
        assert names["Sizes.4"].native_key == "spacing4"

    def test_hyphen_and_dot_collide(self, make_document):
        resolved = _resolved(
            make_document,
            {
                "Semantic": {
                    "$type": "color",
                    "b-c": {"$value": "#FFFFFF"},
                    "b": {"c": {"$value": "#000000"}},
                }
            },
        )

        with pytest.raises(DuplicateKeyError) as exc_info:
            normalize_theme(resolved, DEFAULT_NAMESPACES)

        error = exc_info.value
        assert error.convention == HYPHENATED
        assert error.identifier == "semantic-b-c"
        assert error.paths == ["Semantic.b-c", "Semantic.b.c"]

    def test_camel_and_hyphen_collide(self, make_document):
        resolved = _resolved(
            make_document,
            {
                "Semantic": {
                    "$type": "color",
                    "bgDefault": {"$value": "#FFFFFF"},
                    "bg-default": {"$value": "#000000"},
                }
            },
        )

        with pytest.raises(DuplicateKeyError, match="semantic-bg-default"):
            normalize_theme(resolved, DEFAULT_NAMESPACES)

    def test_collision_only_in_concatenated_form(self, make_document):
        resolved = _resolved(
            make_document,
            {
                "Semantic": {
                    "$type": "color",
                    "a1b": {"$value": "#FFFFFF"},
                    "a": {"1b": {"$value": "#000000"}},
                }
            },
        )

        with pytest.raises(DuplicateKeyError) as exc_info:
            normalize_theme(resolved, DEFAULT_NAMESPACES)

        assert exc_info.value.convention == CONCATENATED
        assert exc_info.value.identifier == "semanticA1b"

    def test_namespace_collision(self, make_document):
        resolved = _resolved(
            make_document,
            {
                "Colors": {"a": {"$type": "color", "$value": "#FFFFFF"}},
                "color": {"a": {"$type": "color", "$value": "#000000"}},
            },
        )

        with pytest.raises(DuplicateKeyError, match="color-a"):
            normalize_theme(resolved, DEFAULT_NAMESPACES)

    def test_custom_namespaces(self, make_document):
        resolved = _resolved(make_document, {"Colors": {"a": {"$type": "color", "$value": "#FFFFFF"}}})

        names = normalize_theme(resolved, {**DEFAULT_NAMESPACES, "Colors": "palette"})

        assert names["Colors.a"].css_name == "palette-a"
        assert names["Colors.a"].native_key == "paletteA"


class TestNormalizeThemes:
    BASE = {"Colors": {"$type": "color", "w": {"$value": "#FFFFFF"}, "k": {"$value": "#000000"}}}

    def test_light_and_dark_paths_sharing_an_identifier(self, make_document):
        document = make_document(
            self.BASE,
            light={"Semantic": {"a-b": {"$type": "color", "$value": "{Colors.w}"}}},
            dark={"Semantic": {"a": {"b": {"$type": "color", "$value": "{Colors.k}"}}}},
        )
        resolved = resolve_graphs(build_graphs(document))

        with pytest.raises(DuplicateKeyError) as exc_info:
            normalize_themes(resolved, DEFAULT_NAMESPACES)

        error = exc_info.value
        assert error.convention == HYPHENATED
        assert error.identifier == "semantic-a-b"
        assert error.paths == ["Semantic.a-b", "Semantic.a.b"]
        assert error.theme == "light+dark"

    def test_concatenated_identifier_shared_across_themes(self, make_document):
        document = make_document(
            self.BASE,
            light={"Semantic": {"a1b": {"$type": "color", "$value": "{Colors.w}"}}},
            dark={"Semantic": {"a": {"1b": {"$type": "color", "$value": "{Colors.k}"}}}},
        )

        with pytest.raises(DuplicateKeyError) as exc_info:
            normalize_themes(resolve_graphs(build_graphs(document)), DEFAULT_NAMESPACES)

        assert exc_info.value.convention == CONCATENATED
        assert exc_info.value.identifier == "semanticA1b"

    def test_same_path_in_both_overlays_is_fine(self, make_document):
        document = make_document(
            self.BASE,
            light={"Semantic": {"bg": {"$type": "color", "$value": "{Colors.w}"}}},
            dark={"Semantic": {"bg": {"$type": "color", "$value": "{Colors.k}"}}},
        )

        names = normalize_themes(resolve_graphs(build_graphs(document)), DEFAULT_NAMESPACES)

        assert names[Theme.LIGHT]["Semantic.bg"] == names[Theme.DARK]["Semantic.bg"]
