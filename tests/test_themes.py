"""
Tests for theme presets, custom theme normalization and saved themes.
"""

import pytest

from conftest import register_user
from work_suite.themes import css_variables, get_presets, normalize_custom_theme
from work_suite.themes.presets import COLOR_KEYS, CSS_VARIABLES, FONT_PRESETS, PRESETS


class TestPresets:
    def test_all_presets_are_complete(self):
        assert len(PRESETS) == 12
        for preset in PRESETS.values():
            assert set(preset["colors"]) == set(COLOR_KEYS)
            assert set(preset["fonts"]) == {"heading", "body", "mono"}
            assert len(preset["styles"]) == 5

    def test_category_filter(self):
        assert len(get_presets("dark")) == 7
        assert len(get_presets("light")) == 5
        assert get_presets("custom") == []

    def test_presets_are_copies(self):
        get_presets()[0]["colors"]["accent"] = "#000000"
        assert PRESETS["midnight"]["colors"]["accent"] == "#e94560"

    def test_css_has_every_variable(self):
        css = css_variables(PRESETS["midnight"])
        assert len(css.splitlines()) == len(CSS_VARIABLES)
        assert "--content-accent: #e94560;" in css
        assert "--content-font-mono: 'JetBrains Mono', monospace;" in css


class TestNormalizeCustomTheme:
    def test_defaults(self):
        theme = normalize_custom_theme({})
        assert theme["name"] == "Custom Theme"
        assert theme["category"] == "custom"
        assert theme["colors"]["accent"] == "#6366f1"
        assert theme["colors"]["link"] == "#64ffda"
        assert theme["styles"]["borderRadius"] == "8px"

    def test_hex_objects_are_flattened(self):
        theme = normalize_custom_theme(
            {
                "name": "Harbor",
                "colors": {"background": {"hex": "#0b1d2a", "lightness": 10}, "accent": "#1fb6ff"},
            }
        )
        colors = theme["colors"]
        assert colors["background"] == "#0b1d2a"
        assert colors["backgroundSolid"] == "#0b1d2a"
        assert colors["link"] == "#1fb6ff"
        assert colors["blockquoteBorder"] == "#1fb6ff"
        assert colors["heading"] == "#ffffff"

    def test_text_cascades_to_heading_and_code(self):
        colors = normalize_custom_theme({"colors": {"text": "#222222"}})["colors"]
        assert colors["heading"] == "#222222"
        assert colors["codeText"] == "#222222"


class TestThemeEndpoints:
    """Tests for /themes."""

    def test_list_presets(self, client):
        response = client.get("/themes/presets")
        assert response.status_code == 200
        ids = [p["id"] for p in response.json()]
        assert ids[0] == "midnight"
        assert len(ids) == 12

    def test_list_presets_by_category(self, client):
        presets = client.get("/themes/presets", params={"category": "light"}).json()
        assert {p["category"] for p in presets} == {"light"}

    def test_bad_category(self, client):
        assert client.get("/themes/presets", params={"category": "neon"}).status_code == 422

    def test_get_preset(self, client):
        assert client.get("/themes/presets/paper").json()["name"] == "Paper"

    def test_unknown_preset(self, client):
        response = client.get("/themes/presets/nope")
        assert response.status_code == 404

    def test_preset_css(self, client):
        data = client.get("/themes/presets/midnight/css").json()
        assert data["id"] == "midnight"
        assert "--content-accent: #e94560;" in data["css"]
        assert data["fonts_url"].startswith("https://fonts.googleapis.com/css2?family=Space+Grotesk")

    def test_fonts(self, client):
        fonts = client.get("/themes/fonts").json()
        assert len(fonts) == len(FONT_PRESETS) == 6
        assert all("googleFonts" in f for f in fonts)

    def test_save_public_theme(self, client):
        response = client.post(
            "/themes",
            json={
                "name": "Harbor",
                "isPublic": True,
                "data": {"colors": {"accent": {"hex": "#1fb6ff"}}},
            },
        )
        assert response.status_code == 201
        saved = response.json()
        assert saved["is_public"] is True

        listed = client.get("/themes").json()
        assert [t["id"] for t in listed] == [saved["id"]]

        css = client.get(f"/themes/{saved['id']}/css").json()
        assert css["theme"]["name"] == "Harbor"
        assert "--content-accent: #1fb6ff;" in css["css"]
        assert "--content-link: #1fb6ff;" in css["css"]

    def test_private_theme_visible_to_owner_only(self, client):
        headers = register_user(client)
        saved = client.post(
            "/themes", json={"name": "Mine", "data": {}}, headers=headers
        ).json()

        assert client.get("/themes").json() == []
        assert client.get(f"/themes/{saved['id']}/css").status_code == 404

        assert [t["id"] for t in client.get("/themes", headers=headers).json()] == [saved["id"]]
        assert client.get(f"/themes/{saved['id']}/css", headers=headers).status_code == 200

    def test_save_requires_name(self, client):
        assert client.post("/themes", json={"data": {}}).status_code == 422


@pytest.mark.parametrize("preset_id", sorted(PRESETS))
def test_every_preset_renders(preset_id):
    assert css_variables(PRESETS[preset_id]).count("--content-") == len(CSS_VARIABLES)
