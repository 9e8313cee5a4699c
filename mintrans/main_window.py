import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QApplication,
    QCheckBox,
    QComboBox,
    QDialog,
    QDoubleSpinBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMenu,
    QPushButton,
    QSpinBox,
    QStyle,
    QSystemTrayIcon,
    QTextBrowser,
    QVBoxLayout,
)

from .config import DELAY_RANGE, INTERFACE_LANGUAGES, MAX_WIDTH_RANGE, TIMEOUT_RANGE, AppConfig, ConfigStore
from .host_events import HostEventFilter
from .logging_config import setup_logger
from .models import TargetLanguage
from .overlay_ui import OverlayView
from .presenter import PanelPresenter
from .providers import DEFAULT_REGISTRY, ProviderRegistry
from .session import TranslatorSession
from .translation_service import TranslationClient
from .translation_workers import QtDispatcher, QtScheduler
from .ui_texts import language_label, text

logger = logging.getLogger(__name__)

INTERFACE_LANGUAGE_NAMES = {"zh": "中文", "en": "English"}
READER_FILE_FILTER = "Text files (*.txt *.md *.html *.htm);;All files (*)"


class SettingsDialog(QDialog):
    """Edits every stored setting; labels follow the interface language live"""

    settings_saved = pyqtSignal()

    def __init__(self, store: ConfigStore, registry: ProviderRegistry = DEFAULT_REGISTRY, parent=None):
        super().__init__(parent)
        self.store = store
        self.registry = registry
        self.setMinimumWidth(420)
        self.setup_ui()
        self.load_settings()
        self.retranslate()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        form = QFormLayout()
        form.setSpacing(10)
        form.setLabelAlignment(Qt.AlignmentFlag.AlignRight)

        self.interface_combo = QComboBox()
        for code in INTERFACE_LANGUAGES:
            self.interface_combo.addItem(INTERFACE_LANGUAGE_NAMES[code], code)
        self.interface_combo.currentIndexChanged.connect(self.retranslate)

        self.provider_combo = QComboBox()
        self.provider_combo.addItem("", "")
        for entry in self.registry:
            self.provider_combo.addItem(entry.display_name, entry.provider_id)
        self.provider_combo.currentIndexChanged.connect(self._update_model_placeholder)

        self.api_key_edit = QLineEdit()
        self.api_key_edit.setEchoMode(QLineEdit.EchoMode.Password)

        self.model_edit = QLineEdit()

        self.language_combo = QComboBox()
        for language in TargetLanguage:
            self.language_combo.addItem("", language.value)

        self.delay_spin = QDoubleSpinBox()
        self.delay_spin.setRange(*DELAY_RANGE)
        self.delay_spin.setSingleStep(0.1)
        self.delay_spin.setDecimals(1)

        self.width_spin = QSpinBox()
        self.width_spin.setRange(*MAX_WIDTH_RANGE)
        self.width_spin.setSingleStep(50)
        self.width_spin.setSuffix(" px")

        self.timeout_spin = QSpinBox()
        self.timeout_spin.setRange(*TIMEOUT_RANGE)
        self.timeout_spin.setSuffix(" s")

        self.debug_check = QCheckBox()

        self._labels = {}
        for key, field in (
            ("interfaceLanguageLabel", self.interface_combo),
            ("aiSelectLabel", self.provider_combo),
            ("apiKeyLabel", self.api_key_edit),
            ("modelLabel", self.model_edit),
            ("targetLanguageLabel", self.language_combo),
            ("delaySecondsLabel", self.delay_spin),
            ("maxWidthLabel", self.width_spin),
            ("requestTimeoutLabel", self.timeout_spin),
            ("debugModeLabel", self.debug_check),
        ):
            label = QLabel()
            self._labels[key] = label
            form.addRow(label, field)
        layout.addLayout(form)

        footer = QHBoxLayout()
        self.status_label = QLabel()
        self.status_label.setStyleSheet("color: #2e7d32;")
        footer.addWidget(self.status_label)
        footer.addStretch()
        self.save_btn = QPushButton()
        self.save_btn.setDefault(True)
        self.save_btn.clicked.connect(self.save_settings)
        footer.addWidget(self.save_btn)
        layout.addLayout(footer)

    def _interface_language(self) -> str:
        return self.interface_combo.currentData() or "zh"

    def retranslate(self):
        lang = self._interface_language()
        self.setWindowTitle(text(lang, "settingsTitle"))
        for key, label in self._labels.items():
            label.setText(text(lang, key))
        self.provider_combo.setItemText(0, text(lang, "noProvider"))
        for index, language in enumerate(TargetLanguage):
            self.language_combo.setItemText(index, language_label(lang, language))
        self.api_key_edit.setPlaceholderText(text(lang, "apiKeyPlaceholder"))
        self.save_btn.setText(text(lang, "saveButton"))
        self._update_model_placeholder()

    def _update_model_placeholder(self):
        entry = self.registry.get(self.provider_combo.currentData())
        if entry is not None:
            self.model_edit.setPlaceholderText(entry.default_model)
        else:
            self.model_edit.setPlaceholderText(text(self._interface_language(), "modelPlaceholder"))

    @staticmethod
    def _select_data(combo: QComboBox, value):
        index = combo.findData(value)
        combo.setCurrentIndex(index if index >= 0 else 0)

    def load_settings(self):
        config = AppConfig.from_store(self.store)
        self._select_data(self.interface_combo, config.interface_language)
        self._select_data(self.provider_combo, config.selected_ai)
        self.api_key_edit.setText(config.api_key)
        self.model_edit.setText(config.model_name)
        self._select_data(self.language_combo, config.target_language.value)
        self.delay_spin.setValue(config.delay_seconds)
        self.width_spin.setValue(config.max_width)
        self.timeout_spin.setValue(int(config.request_timeout))
        self.debug_check.setChecked(config.debug_mode)

    def collect(self) -> AppConfig:
        return AppConfig(
            api_key=self.api_key_edit.text().strip(),
            selected_ai=self.provider_combo.currentData() or "",
            model_name=self.model_edit.text().strip(),
            target_language=TargetLanguage.resolve(self.language_combo.currentData()),
            interface_language=self._interface_language(),
            delay_seconds=round(self.delay_spin.value(), 1),
            max_width=self.width_spin.value(),
            debug_mode=self.debug_check.isChecked(),
            request_timeout=self.timeout_spin.value(),
        )

    def save_settings(self):
        config = self.collect()
        config.save(self.store)
        self.store.sync()
        logger.info("Settings saved (provider %s, target %s)",
                    config.selected_ai or "none", config.target_language.value)
        self.status_label.setText(text(config.interface_language, "settingsSaved"))
        QTimer.singleShot(2000, self.status_label.clear)
        self.settings_saved.emit()


class ReaderWindow(QMainWindow):
    """Host window: a text reader whose selections can be translated"""

    def __init__(self, store: Optional[ConfigStore] = None, registry: ProviderRegistry = DEFAULT_REGISTRY):
        super().__init__()
        self.store = store or ConfigStore()
        self.registry = registry

        self.client = TranslationClient(self.store, registry)
        self.view = OverlayView()
        self.scheduler = QtScheduler(self)
        self.dispatcher = QtDispatcher(self)
        self.presenter = PanelPresenter(self.view, self.client, self.scheduler, self.dispatcher, self.store)
        self.session = TranslatorSession(self.presenter, self.scheduler, self.store)
        self.view.on_activate = self.session.activate
        self.view.on_copy = self.presenter.copy_result

        self.host_filter = HostEventFilter(self.session, self.view, self)
        self.host_filter.install(QApplication.instance())

        self.setup_ui()
        self.setup_menus()
        self.setup_tray_icon()
        self.retranslate()

    def _lang(self) -> str:
        return AppConfig.from_store(self.store).interface_language

    def setup_ui(self):
        self.resize(760, 560)
        self.reader = QTextBrowser()
        self.reader.setReadOnly(False)
        self.reader.setOpenExternalLinks(True)
        self.reader.setStyleSheet("font-size: 15px; padding: 12px;")
        self.setCentralWidget(self.reader)

    def setup_menus(self):
        self.file_menu = self.menuBar().addMenu("")
        self.open_action = QAction(self)
        self.open_action.setShortcut(QKeySequence.StandardKey.Open)
        self.open_action.triggered.connect(lambda: self.open_file())
        self.file_menu.addAction(self.open_action)
        self.file_menu.addSeparator()
        self.quit_action = QAction(self)
        self.quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        self.quit_action.triggered.connect(QApplication.instance().quit)
        self.file_menu.addAction(self.quit_action)

        self.settings_menu = self.menuBar().addMenu("")
        self.settings_action = QAction(self)
        self.settings_action.triggered.connect(self.open_settings)
        self.settings_menu.addAction(self.settings_action)

    def setup_tray_icon(self):
        """System tray menu with the settings command"""
        self.tray_icon = None
        if not QSystemTrayIcon.isSystemTrayAvailable():
            logger.debug("System tray not available; menu bar only")
            return

        self.tray_icon = QSystemTrayIcon(self)
        self.tray_icon.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_FileDialogContentsView))

        tray_menu = QMenu(self)
        self.tray_settings_action = tray_menu.addAction("")
        self.tray_settings_action.triggered.connect(self.open_settings)
        tray_menu.addSeparator()
        self.tray_quit_action = tray_menu.addAction("")
        self.tray_quit_action.triggered.connect(QApplication.instance().quit)

        self.tray_icon.setContextMenu(tray_menu)
        self.tray_icon.show()

    def retranslate(self):
        lang = self._lang()
        self.setWindowTitle(text(lang, "readerTitle"))
        self.reader.setPlaceholderText(text(lang, "readerPlaceholder"))
        self.file_menu.setTitle(text(lang, "fileMenu"))
        self.open_action.setText(text(lang, "openFile"))
        self.quit_action.setText(text(lang, "quit"))
        self.settings_menu.setTitle(text(lang, "settingsMenu"))
        self.settings_action.setText(text(lang, "openSettings"))
        if self.tray_icon is not None:
            self.tray_icon.setToolTip(text(lang, "readerTitle"))
            self.tray_settings_action.setText(text(lang, "openSettings"))
            self.tray_quit_action.setText(text(lang, "quit"))

    def open_file(self, path: Optional[str] = None) -> bool:
        if not path:
            path, _ = QFileDialog.getOpenFileName(self, text(self._lang(), "openFile"), "", READER_FILE_FILTER)
            if not path:
                return False

        file_path = Path(path)
        try:
            content = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.error(f"Failed to open {file_path}: {e}")
            self.statusBar().showMessage(f"{text(self._lang(), 'openFileFailed')} {file_path.name}", 5000)
            return False

        suffix = file_path.suffix.lower()
        if suffix in (".html", ".htm"):
            self.reader.setHtml(content)
        elif suffix == ".md":
            self.reader.setMarkdown(content)
        else:
            self.reader.setPlainText(content)
        self.setWindowTitle(f"{file_path.name} - {text(self._lang(), 'readerTitle')}")
        logger.info(f"Opened {file_path} ({len(content)} chars)")
        return True

    def open_settings(self):
        self.session.close()
        dialog = SettingsDialog(self.store, self.registry, self)
        dialog.settings_saved.connect(self._on_settings_saved)
        dialog.exec()

    def _on_settings_saved(self):
        config = AppConfig.from_store(self.store)
        setup_logger(level=logging.DEBUG if config.debug_mode else logging.INFO)
        self.session.reload_config()
        self.retranslate()

    def closeEvent(self, event):
        self.session.close()
        self.host_filter.uninstall(QApplication.instance())
        self.dispatcher.shutdown()
        if self.tray_icon is not None:
            self.tray_icon.hide()
        super().closeEvent(event)
