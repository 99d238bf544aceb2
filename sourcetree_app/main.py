# sourcetree_app/main.py
"""
Source selector demo window: a sample scene wired to the in-memory store,
selection, streaming session and command bus.
"""
from __future__ import annotations
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from PyQt6.QtGui import QCursor
from PyQt6.QtWidgets import QApplication, QMainWindow, QMenu, QInputDialog, QMessageBox

from sourcetree import contracts
from sourcetree.commands import CommandBus
from sourcetree.config import SelectorConfig
from sourcetree.controller import SourceSelectorController
from sourcetree.log import configure_logging
from sourcetree.scene_store import SceneStore
from sourcetree.selection import SelectionModel
from sourcetree.session import StreamingSession
from sourcetree_app.source_selector import SourceSelectorWidget

logger = logging.getLogger(__name__)

DEMO_SCENE: Dict[str, Any] = {
    "scene_id": "scene_main",
    "sources": [
        {"id": "src_cam", "name": "Webcam", "type": "dshow_input"},
        {"id": "src_game", "name": "Game Capture", "type": "game_capture"},
        {"id": "src_mic", "name": "Microphone", "type": "wasapi_input_capture"},
        {"id": "src_alerts", "name": "Alert Box", "type": "browser_source",
         "properties_manager_type": "widget", "widget_type": "AlertBox"},
        {"id": "src_label", "name": "Latest Follower", "type": "text_gdiplus",
         "properties_manager_type": "streamlabels"},
        {"id": "src_brb", "name": "BRB Scene", "type": "scene"},
    ],
    "nodes": [
        {"id": "folder_overlay", "node_type": "folder", "name": "Overlay"},
        {"id": "item_alerts", "source_id": "src_alerts", "parent_id": "folder_overlay"},
        {"id": "item_label", "source_id": "src_label", "parent_id": "folder_overlay"},
        {"id": "item_cam", "source_id": "src_cam"},
        {"id": "item_mic", "source_id": "src_mic", "video": False, "type": "wasapi_input_capture"},
        {"id": "item_game", "source_id": "src_game"},
        {"id": "item_brb", "source_id": "src_brb", "type": "scene", "visible": False},
    ],
}


class SourceSelectorWindow(QMainWindow):

    def __init__(self, scene_data: Optional[Dict[str, Any]] = None, config: Optional[SelectorConfig] = None):
        super().__init__()
        self.setWindowTitle("Sources")
        self.resize(360, 520)

        self.config = config or SelectorConfig()
        self.store = SceneStore.from_dict(scene_data or DEMO_SCENE)
        self.selection = SelectionModel()
        self.session = StreamingSession()
        self.bus = CommandBus(self.store)
        self.controller = SourceSelectorController(
            self.store,
            self.selection,
            self.bus,
            self.session,
            config=self.config,
        )

        self.selector = SourceSelectorWidget(self.controller)
        self.setCentralWidget(self.selector)

        self.bus.register(contracts.SHOW_NAME_FOLDER, self._on_name_folder)
        self.bus.register(contracts.SHOW_EDIT_MENU, self._on_edit_menu)
        self.bus.register(contracts.SHOW_SOURCE_SHOWCASE, self._on_source_showcase)
        self.bus.register(contracts.SHOW_SOURCE_PROPERTIES, self._on_source_properties)
        self.bus.register(contracts.SHOW_ADVANCED_AUDIO_SETTINGS, self._on_audio_settings)
        self.bus.register(contracts.MAKE_SCENE_ACTIVE, self._on_make_scene_active)

        self.store.subscribe(lambda: self.selection.deselect_missing(self.store))
        self.store.subscribe(self.selector.schedule_refresh)
        self.selection.subscribe(self.selector.schedule_refresh)
        self.session.subscribe(self.selector.schedule_refresh)

    # ---------- UI request handlers ----------

    def _on_name_folder(self, options: Dict[str, Any]) -> None:
        name, ok = QInputDialog.getText(self, "Name Folder", "Please enter the name of the folder")
        name = name.strip()
        if not ok or not name:
            return
        self.bus.submit(
            contracts.CREATE_FOLDER,
            name,
            options.get("items_to_group", []),
            options.get("parent_id") or None,
        )

    def _on_edit_menu(self, options: Dict[str, Any]) -> None:
        menu = QMenu(self)
        if options.get("show_scene_item_menu"):
            act_properties = menu.addAction("Properties")
            act_properties.triggered.connect(lambda: self.controller.source_properties(self.controller.last_selected_id))
            act_remove = menu.addAction("Remove")
            act_remove.triggered.connect(self.controller.remove_items)
            menu.addSeparator()
        act_add_source = menu.addAction("Add Source")
        act_add_source.triggered.connect(self.controller.add_source)
        act_add_folder = menu.addAction("Add Folder")
        act_add_folder.triggered.connect(self.controller.add_folder)
        menu.exec(QCursor.pos())

    def _on_source_showcase(self) -> None:
        QMessageBox.information(self, "Add Source", "The source showcase is not available in this demo.")

    def _on_source_properties(self, source_id: str) -> None:
        source = self.store.get_source(source_id)
        QMessageBox.information(self, "Properties", f"Properties for {source.name if source else source_id}")

    def _on_audio_settings(self, source_id: str) -> None:
        source = self.store.get_source(source_id)
        QMessageBox.information(self, "Advanced Audio Settings", f"Audio settings for {source.name if source else source_id}")

    def _on_make_scene_active(self, scene_id: str) -> None:
        logger.info("Switching to scene %s", scene_id)


def main() -> int:
    config = SelectorConfig()
    configure_logging(config.log_level)

    scene_data = None
    if len(sys.argv) > 1:
        scene_path = Path(sys.argv[1]).expanduser()
        scene_data = json.loads(scene_path.read_text(encoding="utf-8"))
        logger.info("Loaded scene from %s", scene_path)

    app = QApplication(sys.argv)
    win = SourceSelectorWindow(scene_data, config)
    win.show()
    logger.info("Source selector started")
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
