# plugins/core_config_editor/tests/test_config_document.py
import pytest
from httpx import AsyncClient

from backend.core.errors import ParseError, ValidationError
from plugins.core_config_editor.document import ConfigDocument, DocumentState
from plugins.core_config_editor.extractor import extract_config

SOURCE = "// cfg\nexport const config = {\n  audio: { volume: 0.8 },\n  levels: [{ name: 'intro' }],\n};\n"


@pytest.fixture
def document() -> ConfigDocument:
    doc = ConfigDocument()
    doc.load(SOURCE)
    return doc


class TestConfigDocument:
    def test_state_machine(self, document):
        assert ConfigDocument().state == DocumentState.EMPTY
        assert document.state == DocumentState.LOADED
        document.set_path("audio.volume", 0.5)
        assert document.state == DocumentState.EDITED
        document.mark_saved()
        assert document.state == DocumentState.SAVED
        document.set_path("audio.volume", 0.6)
        assert document.state == DocumentState.EDITED

    def test_set_path_is_copy_on_write(self, document):
        before = document.value
        after = document.set_path("audio.volume", 0.3)

        assert before["audio"]["volume"] == 0.8
        assert after["audio"]["volume"] == 0.3
        # untouched sibling subtree is shared
        assert after["levels"] is before["levels"]

    def test_list_index_and_new_key(self, document):
        document.set_path("levels.0.name", "tutorial")
        document.set_path("audio.muted", True)
        assert document.value == {
            "audio": {"volume": 0.8, "muted": True},
            "levels": [{"name": "tutorial"}],
        }

    @pytest.mark.parametrize("path", ["missing.key", "levels.5.name", "levels.x", "audio.volume.deeper", "", "a..b"])
    def test_invalid_paths(self, document, path):
        with pytest.raises(ValidationError):
            document.set_path(path, 1)
        assert document.history_length == 1

    @pytest.mark.parametrize("value", [object(), {1: "int key"}, float("nan"), (1, 2)])
    def test_values_outside_grammar(self, document, value):
        with pytest.raises(ValidationError):
            document.set_path("audio.volume", value)

    def test_undo_redo_bounds(self, document):
        assert not document.undo()
        document.set_path("audio.volume", 0.1)
        document.set_path("audio.volume", 0.2)

        assert document.undo() and document.value["audio"]["volume"] == 0.1
        assert document.undo() and document.value["audio"]["volume"] == 0.8
        assert not document.undo()
        assert document.cursor == 0

        assert document.redo() and document.redo()
        assert not document.redo()
        assert document.value["audio"]["volume"] == 0.2

    def test_edit_after_undo_truncates_redo(self, document):
        for volume in (0.1, 0.2, 0.3):
            document.set_path("audio.volume", volume)
        document.undo()
        document.undo()
        assert document.cursor == 1

        document.set_path("audio.volume", 0.9)

        assert document.history_length == 3
        assert document.cursor == 2
        assert not document.can_redo
        assert not document.redo()
        assert document.value["audio"]["volume"] == 0.9
        document.undo()
        assert document.value["audio"]["volume"] == 0.1

    @pytest.mark.parametrize("source", [
        "export const C = {big: 1e400};",
        "export const C = {s: '\\uD800'};",
    ])
    def test_values_that_cannot_be_saved_are_refused_on_load(self, source):
        doc = ConfigDocument()
        with pytest.raises(ParseError):
            doc.load(source)
        assert doc.state == DocumentState.EMPTY

    def test_history_is_bounded(self):
        doc = ConfigDocument(history_limit=3)
        doc.load(SOURCE)
        for volume in (0.1, 0.2, 0.3, 0.4):
            doc.set_path("audio.volume", volume)

        assert doc.history_length == 3
        while doc.undo():
            pass
        # the original and the first edit were dropped
        assert doc.value["audio"]["volume"] == 0.2

    def test_failed_load_keeps_document(self, document):
        document.set_path("audio.volume", 0.4)
        with pytest.raises(ParseError):
            document.load("export const config = { bad: call() };")
        assert document.value["audio"]["volume"] == 0.4
        assert document.state == DocumentState.EDITED

    def test_render_round_trip(self, document):
        document.set_path("audio.volume", 1)
        rendered = document.render()
        assert rendered.startswith("// cfg\nexport const config = {\n")
        assert rendered.endswith("};\n")
        assert extract_config(rendered).value == document.value

    def test_edit_before_load(self):
        with pytest.raises(ValidationError):
            ConfigDocument().set_path("a", 1)


class TestConfigApi:
    async def test_full_editing_session(self, client: AsyncClient, registered_project: str, ad_project):
        response = await client.post("/api/config/open", json={"project_id": registered_project})
        assert response.status_code == 200, response.text
        snapshot = response.json()
        assert snapshot["path"] == "src/config.js"
        assert snapshot["export_identifier"] == "config"
        assert snapshot["state"] == "loaded"
        assert snapshot["value"]["levels"][1] == {"name": "boss", "time": 90}

        response = await client.patch("/api/config", json={"path": "audio.volume", "value": 0.25})
        assert response.json()["state"] == "edited"
        assert response.json()["can_undo"] is True

        response = await client.post("/api/config/undo")
        assert response.json()["value"]["audio"]["volume"] == 0.8
        response = await client.post("/api/config/redo")
        assert response.json()["value"]["audio"]["volume"] == 0.25

        response = await client.post("/api/config/save")
        assert response.json()["state"] == "saved"

        saved = (ad_project / "src/config.js").read_text(encoding="utf-8")
        assert saved.startswith("// Game configuration\nimport { something } from './other.js';\n\nexport const config = {\n")
        assert '"volume": 0.25' in saved
        assert saved.endswith("};\n\nexport default config;\n")
        # store links survive the rewrite
        assert '"googlePlayStoreLink": "https://play.google.com/store/apps/details?id=demo"' in saved

        assert (await client.delete("/api/config")).status_code == 204
        assert (await client.get("/api/config")).status_code == 404

    async def test_bad_edit_is_400(self, client: AsyncClient, registered_project: str):
        await client.post("/api/config/open", json={"project_id": registered_project})
        response = await client.patch("/api/config", json={"path": "audio.nothing.here", "value": 1})
        assert response.status_code == 400

    async def test_unparseable_config_is_422(self, client: AsyncClient, ad_project_factory):
        root = ad_project_factory(files={"src/config.js": b"export const config = { onTap: () => 1 };"})
        project_id = (await client.post("/api/projects", json={"path": str(root)})).json()["project_id"]

        response = await client.post("/api/config/open", json={"project_id": project_id})
        assert response.status_code == 422

    async def test_path_traversal_is_rejected(self, client: AsyncClient, registered_project: str):
        response = await client.post(
            "/api/config/open", json={"project_id": registered_project, "path": "../outside.js"}
        )
        assert response.status_code == 400
