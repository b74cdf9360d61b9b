from pathlib import Path
from typing import Dict, Optional

from PIL import Image
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPixmap
from PyQt5.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFileDialog,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSlider,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from PF_Libs.constants import (
    BLEND_MODES,
    DEFAULT_PARAMETER_STEP,
    PARAMETER_GROUPS,
    PARAMETER_STEPS,
    PRESETS,
)
from PF_Libs.EditorLib.editor_document import EditorController
from PF_Libs.HistoryLib.history_manager import POSITION_CURRENT
from PF_Libs.ImageEditingLib.adjustment_settings import get_parameter_range
from PF_Libs.ImageEditingLib.image_editing_ops import encode_png_bytes
from PF_Libs.ImageEditingLib.image_import import STANDARD_IMAGE_FILTER, IngestFailure
from PF_Libs.ProjStoreLib.project_store import JsonFileStore


class PixelForgeEditorWindow(QMainWindow):
    def __init__(self, store_dir: Optional[Path] = None) -> None:
        super().__init__()
        self.setWindowTitle("PixelForge Editor")
        self.resize(1400, 850)

        self.controller = EditorController()
        self.store = JsonFileStore(store_dir or Path.home() / ".pixelforge")
        self.sliders: Dict[str, QSlider] = {}
        self.value_labels: Dict[str, QLabel] = {}
        self._syncing = False

        self._build_ui()
        self._connect_signals()
        self.refresh_all()

    # Sliders are integer-valued, so each parameter is scaled by its step
    @staticmethod
    def _step(name: str) -> float:
        return PARAMETER_STEPS.get(name, DEFAULT_PARAMETER_STEP)

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QHBoxLayout(central)
        controls_col = QVBoxLayout()
        layers_col = QVBoxLayout()

        self.btn_load_image = QPushButton("Load Image")
        self.btn_undo = QPushButton("Undo")
        self.btn_redo = QPushButton("Redo")
        self.btn_reset = QPushButton("Reset")
        self.btn_enhance = QPushButton("Quick Enhance")
        self.btn_export = QPushButton("Export PNG")
        self.btn_save_project = QPushButton("Save Project")
        self.btn_load_project = QPushButton("Load Project")

        controls_col.addWidget(self.btn_load_image)
        history_row = QHBoxLayout()
        for button in (self.btn_undo, self.btn_redo, self.btn_reset, self.btn_enhance):
            history_row.addWidget(button)
        controls_col.addLayout(history_row)

        for group_name, names in PARAMETER_GROUPS.items():
            box = QGroupBox(group_name)
            grid = QGridLayout(box)
            for row, name in enumerate(names):
                minimum, maximum, default = get_parameter_range(name)
                step = self._step(name)
                slider = QSlider(Qt.Horizontal)
                slider.setRange(round(minimum / step), round(maximum / step))
                slider.setValue(round(default / step))
                value_label = QLabel(f"{default:g}")
                grid.addWidget(QLabel(name.capitalize()), row, 0)
                grid.addWidget(slider, row, 1)
                grid.addWidget(value_label, row, 2)
                self.sliders[name] = slider
                self.value_labels[name] = value_label
            controls_col.addWidget(box)

        presets_box = QGroupBox("Presets")
        presets_row = QHBoxLayout(presets_box)
        self.preset_buttons = {}
        for preset_name in PRESETS:
            button = QPushButton(preset_name)
            presets_row.addWidget(button)
            self.preset_buttons[preset_name] = button
        controls_col.addWidget(presets_box)

        controls_col.addWidget(self.btn_export)
        controls_col.addWidget(self.btn_save_project)
        controls_col.addWidget(self.btn_load_project)
        controls_col.addStretch(1)

        self.label_preview = QLabel("No image loaded")
        self.label_preview.setAlignment(Qt.AlignCenter)
        self.label_preview.setMinimumSize(600, 600)
        self.label_preview.setStyleSheet("border: 1px solid #888;")

        self.layers_list = QListWidget()
        self.btn_add_layer = QPushButton("Add Layer")
        self.btn_duplicate_layer = QPushButton("Duplicate")
        self.btn_delete_layer = QPushButton("Delete")
        self.check_layer_visible = QCheckBox("Visible")
        self.spin_layer_opacity = QSpinBox()
        self.spin_layer_opacity.setRange(0, 100)
        self.spin_layer_opacity.setSuffix("%")
        self.combo_blend_mode = QComboBox()
        self.combo_blend_mode.addItems(BLEND_MODES)
        self.history_list = QListWidget()

        layers_col.addWidget(QLabel("Layers"))
        layers_col.addWidget(self.layers_list)
        layer_buttons = QHBoxLayout()
        for button in (self.btn_add_layer, self.btn_duplicate_layer, self.btn_delete_layer):
            layer_buttons.addWidget(button)
        layers_col.addLayout(layer_buttons)
        layers_col.addWidget(self.check_layer_visible)
        layers_col.addWidget(QLabel("Opacity"))
        layers_col.addWidget(self.spin_layer_opacity)
        layers_col.addWidget(QLabel("Blend Mode"))
        layers_col.addWidget(self.combo_blend_mode)
        layers_col.addWidget(QLabel("History"))
        layers_col.addWidget(self.history_list)

        root.addLayout(controls_col, stretch=1)
        root.addWidget(self.label_preview, stretch=2)
        root.addLayout(layers_col, stretch=1)

    def _connect_signals(self) -> None:
        self.btn_load_image.clicked.connect(self.load_image)
        self.btn_undo.clicked.connect(lambda: self._run(self.controller.undo))
        self.btn_redo.clicked.connect(lambda: self._run(self.controller.redo))
        self.btn_reset.clicked.connect(lambda: self._run(self.controller.reset_settings))
        self.btn_enhance.clicked.connect(lambda: self._run(self.controller.quick_enhance))
        self.btn_export.clicked.connect(self.export_image)
        self.btn_save_project.clicked.connect(self.save_project)
        self.btn_load_project.clicked.connect(lambda: self._run(self.controller.load_project, self.store))

        for name, slider in self.sliders.items():
            slider.valueChanged.connect(lambda value, name=name: self.on_slider_changed(name, value))
        for preset_name, button in self.preset_buttons.items():
            button.clicked.connect(lambda _, preset_name=preset_name: self._run(self.controller.apply_preset, preset_name))

        self.layers_list.currentRowChanged.connect(self.on_layer_selected)
        self.btn_add_layer.clicked.connect(lambda: self._run(self.controller.add_layer))
        self.btn_duplicate_layer.clicked.connect(
            lambda: self._run_on_active(self.controller.duplicate_layer)
        )
        self.btn_delete_layer.clicked.connect(lambda: self._run_on_active(self.controller.delete_layer))
        self.check_layer_visible.toggled.connect(
            lambda checked: self._run_on_active(self.controller.set_layer_visible, checked)
        )
        self.spin_layer_opacity.valueChanged.connect(
            lambda value: self._run_on_active(self.controller.set_layer_opacity, value)
        )
        self.combo_blend_mode.currentTextChanged.connect(
            lambda mode: self._run_on_active(self.controller.set_layer_blend_mode, mode)
        )
        self.history_list.itemDoubleClicked.connect(
            lambda _: self._run(self.controller.jump_to, self.history_list.currentRow())
        )

    def _run(self, action, *args) -> None:
        if self._syncing:
            return
        action(*args)
        self.refresh_all()

    def _run_on_active(self, action, *args) -> None:
        active = self.controller.document.layers.active_layer
        if active is None:
            return
        self._run(action, active.layer_id, *args)

    def load_image(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Select Image", "", STANDARD_IMAGE_FILTER)
        if not file_path:
            return

        try:
            self.controller.load_image(Path(file_path))
        except IngestFailure as e:
            QMessageBox.warning(self, "Cannot Open Image", str(e))
            return
        self.refresh_all()

    def on_slider_changed(self, name: str, value: int) -> None:
        parameter_value = value * self._step(name)
        self.value_labels[name].setText(f"{parameter_value:g}")
        self._run(self.controller.set_parameter, name, parameter_value)

    def on_layer_selected(self, index: int) -> None:
        layers = self.controller.document.layers.layers
        if self._syncing or index < 0 or index >= len(layers):
            return
        # The list shows the top layer first
        self.controller.set_active_layer(layers[len(layers) - 1 - index].layer_id)
        self.refresh_all()

    def export_image(self) -> None:
        folder = QFileDialog.getExistingDirectory(self, "Select Export Directory")
        if not folder:
            return

        try:
            path = self.controller.export(Path(folder))
        except OSError as e:
            QMessageBox.warning(self, "Export Failed", str(e))
            return
        if path is not None:
            self._show_info("Success", f"Image exported to {path}")

    def save_project(self) -> None:
        self.controller.save_project(self.store)
        self.refresh_all()

    def refresh_all(self) -> None:
        self._syncing = True
        try:
            self._refresh_sliders()
            self._refresh_layers()
            self._refresh_history()
        finally:
            self._syncing = False
        self._refresh_preview()
        self._show_notices()

    def _refresh_sliders(self) -> None:
        settings = self.controller.settings
        for name, slider in self.sliders.items():
            value = getattr(settings, name)
            slider.setValue(round(value / self._step(name)))
            self.value_labels[name].setText(f"{value:g}")
        self.btn_undo.setEnabled(self.controller.document.history.can_undo)
        self.btn_redo.setEnabled(self.controller.document.history.can_redo)

    def _refresh_layers(self) -> None:
        stack = self.controller.document.layers
        self.layers_list.clear()
        for layer in reversed(stack.layers):
            self.layers_list.addItem(f"{layer.name} ({layer.blend_mode}, {layer.opacity:g}%)")

        active = stack.active_layer
        if active is None:
            return
        self.layers_list.setCurrentRow(len(stack) - 1 - stack.index_of(active.layer_id))
        self.check_layer_visible.setChecked(active.visible)
        self.spin_layer_opacity.setValue(round(active.opacity))
        self.combo_blend_mode.setCurrentText(active.blend_mode)

    def _refresh_history(self) -> None:
        self.history_list.clear()
        for entry in self.controller.history_timeline():
            marker = "> " if entry.position == POSITION_CURRENT else "  "
            self.history_list.addItem(f"{marker}{entry.label}")

    def _refresh_preview(self) -> None:
        image = self.controller.snapshot()
        if image is None:
            self.label_preview.setText("No image loaded")
            return
        self._set_preview(self.label_preview, image)

    def _set_preview(self, label: QLabel, image: 'Image.Image') -> None:
        pixmap = QPixmap()
        if not pixmap.loadFromData(encode_png_bytes(image), "PNG"):
            label.setText("Preview failed")
            return

        scaled = pixmap.scaled(label.size(), Qt.AspectRatioMode.KeepAspectRatio, Qt.TransformationMode.SmoothTransformation)
        label.setPixmap(scaled)

    def _show_notices(self) -> None:
        for notice in self.controller.pop_notices():
            self.statusBar().showMessage(notice, 5000)

    def _show_info(self, title: str, message: str) -> None:
        QMessageBox.information(self, title, message)
