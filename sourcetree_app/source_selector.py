# sourcetree_app/source_selector.py
"""
Source selector panel - the scene's sources and folders as a tree with
visibility, lock and selective-recording toggles, multi-select and
drag-and-drop reordering.
"""
from __future__ import annotations
import logging
from typing import Dict, List, Optional, Tuple

from PyQt6.QtCore import Qt, QPoint, QTimer, pyqtSignal
from PyQt6.QtGui import QDropEvent
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTreeWidget, QTreeWidgetItem,
    QToolButton, QLabel, QAbstractItemView, QApplication
)

from sourcetree.controller import SourceSelectorController
from sourcetree.reorder import DropInfo
from sourcetree.selection import Modifiers
from sourcetree.selective_recording import indicator_for, state_from_flags
from sourcetree.tree_builder import TreeNode

logger = logging.getLogger(__name__)

NODE_ID_ROLE = Qt.ItemDataRole.UserRole
IS_LEAF_ROLE = Qt.ItemDataRole.UserRole.value + 1

ICON_GLYPHS: Dict[str, str] = {
    "icon-lock": "\U0001F512",
    "icon-unlock": "\U0001F513",
    "icon-view": "\U0001F441",
    "icon-hide": "\u25CB",
    "icon-smart-record": "⏺",
    "icon-broadcast": "\U0001F4E1",
    "icon-studio": "\U0001F3AC",
    "icon-add-folder": "\U0001F4C1+",
    "icon-add": "+",
    "icon-subtract": "−",
    "icon-settings": "⚙",
}

ROW_ICON_GLYPHS: Dict[str, str] = {
    "fas fa-folder-open": "\U0001F4C2",
    "fa fa-folder": "\U0001F4C1",
    "fas fa-file": "\U0001F4C4",
    "fas fa-file-alt": "\U0001F4DD",
    "icon-error": "\u26A0",
    "icon-image": "\U0001F5BC",
    "icon-color": "\u25A0",
    "icon-browser": "\U0001F310",
    "icon-media": "\U0001F39E",
    "icon-text": "T",
    "icon-display": "\U0001F5A5",
    "icon-window": "\u25A1",
    "icon-console": "\U0001F3AE",
    "icon-webcam": "\U0001F4F7",
    "icon-mic": "\U0001F3A4",
    "icon-audio": "\U0001F50A",
    "icon-share": "\U0001F517",
    "fas fa-object-group": "\u25A3",
    "fas fa-bell": "\U0001F514",
    "fas fa-calendar": "\U0001F4C5",
    "fas fa-comments": "\U0001F4AC",
    "fas fa-th-list": "\u2630",
    "fas fa-beer": "\U0001F37A",
    "fas fa-eye": "\U0001F441",
    "fas fa-gavel": "\u2696",
    "fas fa-align-center": "\u2261",
    "fas fa-chart-pie": "\u25D4",
}
ROW_ICON_FALLBACK = "\U0001F4C4"

SOURCES_TOOLTIP = "The building blocks of your scene. Also contains widgets."
ADD_SOURCE_TOOLTIP = "Add a new Source to your Scene. Includes widgets."
REMOVE_SOURCES_TOOLTIP = "Remove Sources from your Scene."
OPEN_PROPERTIES_TOOLTIP = "Open the Source Properties."
ADD_GROUP_TOOLTIP = "Add a Group so you can move multiple Sources at the same time."
FOLDER_HELP_TEXT = "Wondering how to expand your folders? Just click on the folder icon"

ICON_TOOLBUTTON_STYLE = """
QToolButton {
    border: none;
    padding: 2px;
}
QToolButton:disabled {
    color: palette(mid);
}
QToolButton[active="true"] {
    color: #31C3A2;
}
"""


def _icon_button(icon_class: str, tooltip: str) -> QToolButton:
    btn = QToolButton()
    btn.setText(ICON_GLYPHS.get(icon_class, icon_class))
    btn.setProperty("iconClass", icon_class)
    btn.setToolTip(tooltip)
    btn.setAutoRaise(True)
    return btn


class SourceRow(QWidget):
    """Title plus the per-node action buttons shown on each tree row."""

    toggle_visibility = pyqtSignal(str)
    toggle_lock = pyqtSignal(str)
    cycle_selective_recording = pyqtSignal(str)

    def __init__(self, node: TreeNode, selective_recording_enabled: bool, parent: Optional[QWidget] = None):
        super().__init__(parent)
        view = node.view
        self.node_id = view.id
        self.setObjectName("sourceTitleContainer")
        self.setProperty("dataName", view.title)
        self.setStyleSheet(ICON_TOOLBUTTON_STYLE)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 4, 0)
        layout.setSpacing(2)

        self.lbl_icon = QLabel(ROW_ICON_GLYPHS.get(view.icon, ROW_ICON_FALLBACK))
        self.lbl_icon.setProperty("iconClass", view.icon)
        layout.addWidget(self.lbl_icon)

        self.lbl_title = QLabel(view.title)
        layout.addWidget(self.lbl_title, stretch=1)

        self.btn_recording: Optional[QToolButton] = None
        if selective_recording_enabled:
            indicator = indicator_for(state_from_flags(view.is_stream_visible, view.is_recording_visible))
            self.btn_recording = _icon_button(indicator.icon, indicator.tooltip)
            self.btn_recording.setEnabled(not view.is_locked)
            self.btn_recording.clicked.connect(lambda: self.cycle_selective_recording.emit(self.node_id))
            layout.addWidget(self.btn_recording)

        self.btn_lock = _icon_button("icon-lock" if view.is_locked else "icon-unlock", "Lock")
        self.btn_lock.clicked.connect(lambda: self.toggle_lock.emit(self.node_id))
        layout.addWidget(self.btn_lock)

        self.btn_visibility = _icon_button("icon-view" if view.is_visible else "icon-hide", "Visibility")
        self.btn_visibility.clicked.connect(lambda: self.toggle_visibility.emit(self.node_id))
        layout.addWidget(self.btn_visibility)


class SourceTree(QTreeWidget):
    """Tree that reports clicks and drops to the controller instead of moving rows itself."""

    def __init__(self, controller: SourceSelectorController, owner: "SourceSelectorWidget"):
        super().__init__()
        self._controller = controller
        self._owner = owner
        self._drag_node_id: Optional[str] = None
        self._drag_node_ids: List[str] = []
        self.setHeaderHidden(True)
        self.setDragEnabled(True)
        self.setAcceptDrops(True)
        self.setDropIndicatorShown(True)
        self.setDragDropMode(QAbstractItemView.DragDropMode.InternalMove)
        self.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)

    def startDrag(self, supportedActions) -> None:
        self.begin_drag(self.currentItem())
        super().startDrag(supportedActions)

    def begin_drag(self, item: Optional[QTreeWidgetItem]) -> None:
        """Remember the dragged row and its descendants until the drop."""
        self._drag_node_id = item.data(0, NODE_ID_ROLE) if item else None
        self._drag_node_ids = self.subtree_ids(item) if item else []

    def dropEvent(self, event: QDropEvent) -> None:
        drop = self.drop_info_at(event.position().toPoint())
        # The store owns the order; the tree is rebuilt from it after the command runs
        event.setDropAction(Qt.DropAction.IgnoreAction)
        event.accept()
        self._drag_node_id = None
        self._drag_node_ids = []
        if drop is None:
            return
        self._controller.handle_sort(drop)
        self._owner.schedule_refresh()

    def drop_info_at(self, pos: QPoint) -> Optional[DropInfo]:
        target = self.itemAt(pos)
        if target is None:
            return None
        return self.drop_info_for(target, self.dropIndicatorPosition())

    def drop_info_for(
        self,
        target: QTreeWidgetItem,
        indicator: QAbstractItemView.DropIndicatorPosition,
    ) -> Optional[DropInfo]:
        if self._drag_node_id is None:
            return None

        row = self._row_of(target)
        if indicator == QAbstractItemView.DropIndicatorPosition.AboveItem:
            drop_position, drop_to_gap = row - 1, True
        elif indicator == QAbstractItemView.DropIndicatorPosition.BelowItem:
            drop_position, drop_to_gap = row + 1, True
        else:
            drop_position, drop_to_gap = row, False

        return DropInfo(
            drag_node_id=self._drag_node_id,
            target_node_id=target.data(0, NODE_ID_ROLE),
            target_is_leaf=bool(target.data(0, IS_LEAF_ROLE)),
            target_pos=self.position_path(target),
            drop_position=drop_position,
            drop_to_gap=drop_to_gap,
            drag_node_ids=tuple(self._drag_node_ids),
        )

    def subtree_ids(self, item: QTreeWidgetItem) -> List[str]:
        ids = [item.data(0, NODE_ID_ROLE)]
        for index in range(item.childCount()):
            ids.extend(self.subtree_ids(item.child(index)))
        return ids

    def position_path(self, item: QTreeWidgetItem) -> str:
        """Dash-separated row indexes from the top level down, e.g. ``0-2-1``."""
        segments: List[str] = []
        current: Optional[QTreeWidgetItem] = item
        while current is not None:
            segments.insert(0, str(self._row_of(current)))
            current = current.parent()
        return "-".join(segments)

    def _row_of(self, item: QTreeWidgetItem) -> int:
        parent = item.parent()
        if parent is None:
            return self.indexOfTopLevelItem(item)
        return parent.indexOfChild(item)


class SourceSelectorWidget(QWidget):
    """Studio controls, the source tree and the folder help tip."""

    def __init__(self, controller: SourceSelectorController, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.controller = controller
        self._items: Dict[str, QTreeWidgetItem] = {}
        self._refreshing = False
        self._refresh_pending = False
        self._setup_ui()
        self.controller.set_scroll_handler(self.scroll_to_node)
        self.refresh()

    def _setup_ui(self) -> None:
        """Build the UI."""
        self.setObjectName("SourceSelector")
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        # Studio controls
        controls = QHBoxLayout()
        controls.setContentsMargins(6, 4, 6, 4)
        lbl_sources = QLabel("Sources")
        lbl_sources.setToolTip(SOURCES_TOOLTIP)
        controls.addWidget(lbl_sources)
        controls.addStretch()

        self.btn_selective_recording = _icon_button("icon-smart-record", "Toggle Selective Recording")
        self.btn_selective_recording.clicked.connect(self._on_toggle_selective_recording)
        controls.addWidget(self.btn_selective_recording)

        self.btn_add_folder = _icon_button("icon-add-folder", ADD_GROUP_TOOLTIP)
        self.btn_add_folder.clicked.connect(self.controller.add_folder)
        controls.addWidget(self.btn_add_folder)

        self.btn_add_source = _icon_button("icon-add", ADD_SOURCE_TOOLTIP)
        self.btn_add_source.clicked.connect(self.controller.add_source)
        controls.addWidget(self.btn_add_source)

        self.btn_remove = _icon_button("icon-subtract", REMOVE_SOURCES_TOOLTIP)
        self.btn_remove.clicked.connect(self._on_remove)
        controls.addWidget(self.btn_remove)

        self.btn_properties = _icon_button("icon-settings", OPEN_PROPERTIES_TOOLTIP)
        self.btn_properties.clicked.connect(self._on_properties)
        controls.addWidget(self.btn_properties)

        layout.addLayout(controls)

        # Tree
        self.tree = SourceTree(self.controller, self)
        self.tree.itemClicked.connect(self._on_item_clicked)
        self.tree.itemDoubleClicked.connect(self._on_item_double_clicked)
        self.tree.itemExpanded.connect(self._on_item_toggled)
        self.tree.itemCollapsed.connect(self._on_item_toggled)
        self.tree.customContextMenuRequested.connect(self._on_context_menu)
        config = self.controller.config
        if config is None or config.smooth_scroll:
            self.tree.setVerticalScrollMode(QAbstractItemView.ScrollMode.ScrollPerPixel)
        else:
            self.tree.setVerticalScrollMode(QAbstractItemView.ScrollMode.ScrollPerItem)
        layout.addWidget(self.tree, stretch=1)

        # Help tip
        self.help_tip = QWidget()
        tip_layout = QHBoxLayout(self.help_tip)
        tip_layout.setContentsMargins(6, 2, 6, 2)
        self.lbl_help_tip = QLabel(FOLDER_HELP_TEXT)
        self.lbl_help_tip.setWordWrap(True)
        tip_layout.addWidget(self.lbl_help_tip, stretch=1)
        btn_dismiss = QToolButton()
        btn_dismiss.setText("✕")
        btn_dismiss.clicked.connect(self._on_dismiss_help_tip)
        tip_layout.addWidget(btn_dismiss)
        layout.addWidget(self.help_tip)

    # ---------- Rendering ----------

    def refresh(self) -> None:
        """Rebuild the tree from the controller's current data."""
        if self._refreshing:
            return
        self._refreshing = True
        try:
            scroll = self.tree.verticalScrollBar().value()
            self.tree.blockSignals(True)
            self.tree.clear()
            self._items = {}
            built: List[Tuple[QTreeWidgetItem, TreeNode]] = []
            for node in self.controller.tree_data:
                self.tree.addTopLevelItem(self._build_item(node, built))

            # Row widgets can only be attached once the item is in the tree
            selective = self.controller.selective_recording_enabled
            for item, node in built:
                self.tree.setItemWidget(item, 0, self._build_row(node, selective))

            expanded = set(self.controller.expanded_folder_ids)
            active = set(self.controller.active_item_ids)
            for node_id, item in self._items.items():
                item.setExpanded(node_id in expanded)
                item.setSelected(node_id in active)
            self.tree.blockSignals(False)
            self.tree.verticalScrollBar().setValue(scroll)
            self._update_controls()
        finally:
            self._refreshing = False

    def _build_item(self, node: TreeNode, built: List[Tuple[QTreeWidgetItem, TreeNode]]) -> QTreeWidgetItem:
        item = QTreeWidgetItem()
        item.setData(0, NODE_ID_ROLE, node.key)
        item.setData(0, IS_LEAF_ROLE, node.is_leaf)
        flags = Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable | Qt.ItemFlag.ItemIsDragEnabled
        if not node.is_leaf:
            flags |= Qt.ItemFlag.ItemIsDropEnabled
            item.setChildIndicatorPolicy(QTreeWidgetItem.ChildIndicatorPolicy.ShowIndicator)
        item.setFlags(flags)
        self._items[node.key] = item
        built.append((item, node))

        for child in node.children:
            item.addChild(self._build_item(child, built))
        return item

    def _build_row(self, node: TreeNode, selective_recording_enabled: bool) -> SourceRow:
        row = SourceRow(node, selective_recording_enabled)
        row.toggle_visibility.connect(self._on_toggle_visibility)
        row.toggle_lock.connect(self._on_toggle_lock)
        row.cycle_selective_recording.connect(self._on_cycle_selective_recording)
        return row

    def row_for(self, node_id: str) -> Optional[SourceRow]:
        item = self._items.get(node_id)
        if item is None:
            return None
        return self.tree.itemWidget(item, 0)

    def _update_controls(self) -> None:
        self.btn_selective_recording.setProperty("active", self.controller.selective_recording_enabled)
        self.btn_selective_recording.setEnabled(not self.controller.selective_recording_locked)
        self.btn_selective_recording.style().unpolish(self.btn_selective_recording)
        self.btn_selective_recording.style().polish(self.btn_selective_recording)
        self.btn_remove.setEnabled(bool(self.controller.active_item_ids))
        self.btn_properties.setEnabled(self.controller.can_show_properties())
        self.help_tip.setVisible(self.controller.show_folder_help_tip)

    def schedule_refresh(self) -> None:
        """Rebuild on the next event loop pass; safe to call from item signals."""
        if self._refresh_pending:
            return
        self._refresh_pending = True
        QTimer.singleShot(0, self._run_scheduled_refresh)

    def _run_scheduled_refresh(self) -> None:
        self._refresh_pending = False
        self.refresh()

    def scroll_to_node(self, node_id: str) -> None:
        QTimer.singleShot(0, lambda: self._scroll_now(node_id))

    def _scroll_now(self, node_id: str) -> None:
        self.refresh()
        item = self._items.get(node_id)
        if item is not None:
            self.tree.scrollToItem(item, QAbstractItemView.ScrollHint.EnsureVisible)

    # ---------- Event handlers ----------

    def _on_item_clicked(self, item: QTreeWidgetItem, column: int) -> None:
        node_id = item.data(0, NODE_ID_ROLE)
        mods = QApplication.keyboardModifiers()
        self.controller.make_active(
            node_id,
            Modifiers(
                ctrl=bool(mods & Qt.KeyboardModifier.ControlModifier),
                shift=bool(mods & Qt.KeyboardModifier.ShiftModifier),
            ),
        )
        self.schedule_refresh()

    def _on_item_double_clicked(self, item: QTreeWidgetItem, column: int) -> None:
        self.controller.source_properties(item.data(0, NODE_ID_ROLE))

    def _on_item_toggled(self, item: QTreeWidgetItem) -> None:
        self.controller.toggle_folder(item.data(0, NODE_ID_ROLE))
        self.schedule_refresh()

    def _on_context_menu(self, position) -> None:
        item = self.tree.itemAt(position)
        node_id = item.data(0, NODE_ID_ROLE) if item else None
        self.controller.show_context_menu(node_id)

    def _on_toggle_visibility(self, node_id: str) -> None:
        self.controller.toggle_visibility(node_id)
        self.schedule_refresh()

    def _on_toggle_lock(self, node_id: str) -> None:
        self.controller.toggle_lock(node_id)
        self.schedule_refresh()

    def _on_cycle_selective_recording(self, node_id: str) -> None:
        self.controller.cycle_selective_recording(node_id)
        self.schedule_refresh()

    def _on_toggle_selective_recording(self) -> None:
        self.controller.toggle_selective_recording()
        self.schedule_refresh()

    def _on_remove(self) -> None:
        self.controller.remove_items()
        self.schedule_refresh()

    def _on_properties(self) -> None:
        ids = self.controller.active_item_ids
        self.controller.source_properties(ids[0] if ids else None)

    def _on_dismiss_help_tip(self) -> None:
        self.controller.dismiss_folder_help_tip()
        self.help_tip.setVisible(False)
