# sourcetree/catalogs.py
"""
Display-data catalogs: icon classes for source types and widget types.
"""
from __future__ import annotations
from typing import Dict, Iterable, Mapping, Optional

from sourcetree.nodes import PropertiesManagerType, Source

FOLDER_OPEN_ICON = "fas fa-folder-open"
FOLDER_CLOSED_ICON = "fa fa-folder"
STREAMLABELS_ICON = "fas fa-file-alt"
WIDGET_FALLBACK_ICON = "icon-error"
SOURCE_FALLBACK_ICON = "fas fa-file"

SOURCE_DISPLAY_DATA: Dict[str, Dict[str, str]] = {
    "image_source": {"name": "Image", "icon": "icon-image"},
    "color_source": {"name": "Color Block", "icon": "icon-color"},
    "browser_source": {"name": "Browser Source", "icon": "icon-browser"},
    "slideshow": {"name": "Image Slide Show", "icon": "icon-image"},
    "ffmpeg_source": {"name": "Media Source", "icon": "icon-media"},
    "text_gdiplus": {"name": "Text (GDI+)", "icon": "icon-text"},
    "text_ft2_source": {"name": "Text (FreeType 2)", "icon": "icon-text"},
    "monitor_capture": {"name": "Display Capture", "icon": "icon-display"},
    "window_capture": {"name": "Window Capture", "icon": "icon-window"},
    "game_capture": {"name": "Game Capture", "icon": "icon-console"},
    "dshow_input": {"name": "Video Capture Device", "icon": "icon-webcam"},
    "wasapi_input_capture": {"name": "Audio Input Capture", "icon": "icon-mic"},
    "wasapi_output_capture": {"name": "Audio Output Capture", "icon": "icon-audio"},
    "scene": {"name": "Scene", "icon": "fas fa-object-group"},
}

WIDGET_DISPLAY_DATA: Dict[str, Dict[str, str]] = {
    "AlertBox": {"name": "Alert Box", "icon": "fas fa-bell"},
    "DonationGoal": {"name": "Tip Goal", "icon": "fas fa-calendar"},
    "FollowerGoal": {"name": "Follower Goal", "icon": "fas fa-calendar"},
    "ChatBox": {"name": "Chat Box", "icon": "fas fa-comments"},
    "EventList": {"name": "Event List", "icon": "fas fa-th-list"},
    "TipJar": {"name": "The Jar", "icon": "fas fa-beer"},
    "ViewerCount": {"name": "Viewer Count", "icon": "fas fa-eye"},
    "StreamBoss": {"name": "Stream Boss", "icon": "fas fa-gavel"},
    "Credits": {"name": "Credits", "icon": "fas fa-align-center"},
    "SpinWheel": {"name": "Spin Wheel", "icon": "fas fa-chart-pie"},
    "MediaShare": {"name": "Media Share", "icon": "icon-share"},
}


class DisplayCatalogs:
    """Lookup over the generic source catalog and the widget catalog."""

    def __init__(
        self,
        source_display_data: Optional[Mapping[str, Mapping[str, str]]] = None,
        widget_display_data: Optional[Mapping[str, Mapping[str, str]]] = None,
    ):
        self.source_display_data = source_display_data if source_display_data is not None else SOURCE_DISPLAY_DATA
        self.widget_display_data = widget_display_data if widget_display_data is not None else WIDGET_DISPLAY_DATA

    def icon_for_source_type(self, source_type: str) -> Optional[str]:
        entry = self.source_display_data.get(source_type)
        return entry.get("icon") if entry else None

    def icon_for_widget_type(self, widget_type: Optional[str]) -> Optional[str]:
        if widget_type is None:
            return None
        entry = self.widget_display_data.get(widget_type)
        return entry.get("icon") if entry else None


def folder_icon(folder_id: str, expanded_folder_ids: Iterable[str]) -> str:
    return FOLDER_OPEN_ICON if folder_id in expanded_folder_ids else FOLDER_CLOSED_ICON


def source_icon(source: Optional[Source], catalogs: DisplayCatalogs) -> str:
    """Resolve an item's icon from its source classification."""
    if source is None:
        return SOURCE_FALLBACK_ICON

    if source.properties_manager_type is PropertiesManagerType.STREAMLABELS:
        return STREAMLABELS_ICON

    if source.properties_manager_type is PropertiesManagerType.WIDGET:
        return catalogs.icon_for_widget_type(source.widget_type) or WIDGET_FALLBACK_ICON

    return catalogs.icon_for_source_type(source.type) or SOURCE_FALLBACK_ICON
