"""Internationalization module — EN/RU language support."""

from nmwifi.core.config import load_settings, save_setting

# ═══════════════════════════════════════════════════════════════
# Translation dictionaries
# ═══════════════════════════════════════════════════════════════

TRANSLATIONS = {
    "en": {
        # ─── General ───
        "app_title": "Wi-Fi Manager",
        "app_subtitle": "NetworkManager in your terminal",
        "loading": "Loading...",
        "error": "Error",
        "yes": "Yes",
        "no": "No",
        "not_available": "N/A",
        "radio_on": "Wi-Fi: on",
        "radio_off": "Wi-Fi: off",
        "radio_unknown": "Wi-Fi: ?",

        # ─── Columns ───
        "col_ssid": "SSID",
        "col_signal": "Signal",
        "col_security": "Security",
        "col_status": "Status",
        "col_bssid": "BSSID",
        "col_channel": "Ch",
        "col_name": "Name",
        "col_device": "Device",
        "col_type": "Type",
        "col_uuid": "UUID",
        "mark_connected": "Connected",
        "mark_saved": "Saved",
        "mark_out_of_range": "Out of range",
        "security_open": "Open",
        "security_secured": "Secured",

        # ─── Networks Screen ───
        "networks_title": "Wi-Fi Networks",
        "networks_empty": "No networks found. Press R to rescan.",
        "radio_disabled_hint": "Wi-Fi radio is off. Press T to turn it on.",
        "filter_placeholder": "Type to filter, Enter to apply, Esc to clear",
        "filter_active": "Filter: {query}",
        "from_cache": "cached list",
        "footer_networks": "Enter: Connect | /: Filter | R: Rescan | D: Disconnect | F: Forget | I: Info | P: Profiles | N: Hidden | T: Radio | U: Unnamed | Q: Quit",

        # ─── Profiles Screen ───
        "profiles_title": "Known Profiles",
        "profiles_empty": "No saved Wi-Fi profiles.",
        "footer_profiles": "Enter: Connect | F: Forget | Esc: Back | Q: Quit",

        # ─── Password / Hidden SSID ───
        "password_title": "Password for {ssid}",
        "password_placeholder": "Password",
        "password_hidden_hint": "Leave empty for an open hidden network",
        "footer_password": "Enter: Connect | Esc: Cancel",
        "hidden_title": "Connect to a hidden network",
        "hidden_placeholder": "Network name (SSID)",
        "footer_hidden": "Enter: Next | Esc: Cancel",

        # ─── Connecting / Result ───
        "connecting_to": "Connecting to {ssid}...",
        "footer_connecting": "Esc: Stop waiting",
        "result_success": "Connected to {ssid}",
        "result_failed": "Could not connect to {ssid}",
        "result_timeout": "Connection to {ssid} timed out",
        "footer_result": "Enter/Esc: Back to networks",

        # ─── Active connection info ───
        "info_title": "Active Connection",
        "info_device": "Device",
        "info_type": "Type",
        "info_state": "State",
        "info_connection": "Connection",
        "info_mac": "MAC",
        "info_ipv4": "IPv4",
        "info_gateway4": "IPv4 gateway",
        "info_dns": "DNS",
        "info_ipv6": "IPv6",
        "info_gateway6": "IPv6 gateway",
        "info_failed": "Could not read device details: {error}",
        "footer_info": "Enter/Esc: Back",

        # ─── Confirm dialogs ───
        "confirm_disconnect": "Disconnect from {name}?",
        "confirm_forget": "Forget {name}? The saved password will be deleted.",
        "confirm_open": "{ssid} is an open network. Traffic will not be encrypted. Connect?",
        "footer_confirm": "Enter/Y: Confirm | Esc/N: Cancel",

        # ─── Status messages ───
        "status_scanning": "Scanning Wi-Fi networks...",
        "scan_failed": "Scan failed: {error}",
        "profiles_failed": "Could not load profiles: {error}",
        "radio_enabling": "Turning Wi-Fi on...",
        "radio_disabling": "Turning Wi-Fi off...",
        "radio_enabled": "Wi-Fi enabled",
        "radio_disabled": "Wi-Fi disabled",
        "radio_failed": "Could not change Wi-Fi radio: {error}",
        "radio_status_failed": "Could not read Wi-Fi radio state: {error}",
        "hidden_shown": "Showing unnamed networks",
        "hidden_suppressed": "Hiding unnamed networks",
        "not_connected": "Not connected to any Wi-Fi network",
        "not_saved": "{ssid} is not a saved network",
        "no_device": "The active connection has no device",
        "disconnecting": "Disconnecting {name}...",
        "disconnected": "Disconnected from {name}",
        "disconnect_failed": "Could not disconnect {name}: {error}",
        "forgetting": "Forgetting {name}...",
        "forgotten": "Forgot {name}",
        "forget_failed": "Could not forget {name}: {error}",
        "action_pending": "Still working on {name}. Try again when it finishes.",
        "unresolved": "Cannot tell which connection to use. Refresh and try again.",
        "password_required": "A password is required for {ssid}",
        "ssid_required": "Enter a network name",
        "stored_credentials_failed": "Stored credentials for {ssid} failed. Enter the password.",
        "connect_abandoned": "Stopped waiting for {ssid}",
        "operation_busy": "Another operation is still running",

        # ─── Help ───
        "help_title": "Keys",
        "help_text": (
            "Enter  connect / confirm\n"
            "Esc    back / cancel\n"
            "/      filter networks\n"
            "R      rescan\n"
            "D      disconnect\n"
            "F      forget saved network\n"
            "I      active connection details\n"
            "P      known profiles\n"
            "N      connect to hidden network\n"
            "T      toggle Wi-Fi radio\n"
            "U      show/hide unnamed networks\n"
            "J/K    move down/up\n"
            "Q      quit"
        ),

        # ─── Dependencies ───
        "deps_system": "System Dependencies",
        "deps_python": "Python Dependencies",
        "dep_name": "Name",
        "dep_status": "Status",
        "dep_description": "Description",
        "dep_installed": "Installed",
        "dep_missing": "Missing",
        "dep_critical": "critical",
        "nmcli_missing": "nmcli was not found. Install NetworkManager and try again.",
    },

    "ru": {
        # ─── General ───
        "app_title": "Wi-Fi Менеджер",
        "app_subtitle": "NetworkManager в терминале",
        "loading": "Загрузка...",
        "error": "Ошибка",
        "yes": "Да",
        "no": "Нет",
        "not_available": "Н/Д",
        "radio_on": "Wi-Fi: вкл",
        "radio_off": "Wi-Fi: выкл",
        "radio_unknown": "Wi-Fi: ?",

        # ─── Columns ───
        "col_ssid": "SSID",
        "col_signal": "Сигнал",
        "col_security": "Защита",
        "col_status": "Статус",
        "col_bssid": "BSSID",
        "col_channel": "Кан",
        "col_name": "Имя",
        "col_device": "Устройство",
        "col_type": "Тип",
        "col_uuid": "UUID",
        "mark_connected": "Подключено",
        "mark_saved": "Сохранена",
        "mark_out_of_range": "Вне зоны",
        "security_open": "Открытая",
        "security_secured": "Защищена",

        # ─── Networks Screen ───
        "networks_title": "Сети Wi-Fi",
        "networks_empty": "Сети не найдены. Нажмите R для поиска.",
        "radio_disabled_hint": "Wi-Fi выключен. Нажмите T, чтобы включить.",
        "filter_placeholder": "Введите фильтр, Enter применить, Esc сбросить",
        "filter_active": "Фильтр: {query}",
        "from_cache": "сохранённый список",
        "footer_networks": "Enter: Подключить | /: Фильтр | R: Поиск | D: Отключить | F: Забыть | I: Инфо | P: Профили | N: Скрытая | T: Радио | U: Без имени | Q: Выход",

        # ─── Profiles Screen ───
        "profiles_title": "Сохранённые профили",
        "profiles_empty": "Нет сохранённых профилей Wi-Fi.",
        "footer_profiles": "Enter: Подключить | F: Забыть | Esc: Назад | Q: Выход",

        # ─── Password / Hidden SSID ───
        "password_title": "Пароль для {ssid}",
        "password_placeholder": "Пароль",
        "password_hidden_hint": "Оставьте пустым для открытой скрытой сети",
        "footer_password": "Enter: Подключить | Esc: Отмена",
        "hidden_title": "Подключение к скрытой сети",
        "hidden_placeholder": "Имя сети (SSID)",
        "footer_hidden": "Enter: Далее | Esc: Отмена",

        # ─── Connecting / Result ───
        "connecting_to": "Подключение к {ssid}...",
        "footer_connecting": "Esc: Не ждать",
        "result_success": "Подключено к {ssid}",
        "result_failed": "Не удалось подключиться к {ssid}",
        "result_timeout": "Время подключения к {ssid} истекло",
        "footer_result": "Enter/Esc: К списку сетей",

        # ─── Active connection info ───
        "info_title": "Активное подключение",
        "info_device": "Устройство",
        "info_type": "Тип",
        "info_state": "Состояние",
        "info_connection": "Подключение",
        "info_mac": "MAC",
        "info_ipv4": "IPv4",
        "info_gateway4": "Шлюз IPv4",
        "info_dns": "DNS",
        "info_ipv6": "IPv6",
        "info_gateway6": "Шлюз IPv6",
        "info_failed": "Не удалось получить данные устройства: {error}",
        "footer_info": "Enter/Esc: Назад",

        # ─── Confirm dialogs ───
        "confirm_disconnect": "Отключиться от {name}?",
        "confirm_forget": "Забыть {name}? Сохранённый пароль будет удалён.",
        "confirm_open": "{ssid} — открытая сеть. Трафик не шифруется. Подключиться?",
        "footer_confirm": "Enter/Y: Подтвердить | Esc/N: Отмена",

        # ─── Status messages ───
        "status_scanning": "Поиск сетей Wi-Fi...",
        "scan_failed": "Ошибка поиска: {error}",
        "profiles_failed": "Не удалось загрузить профили: {error}",
        "radio_enabling": "Включение Wi-Fi...",
        "radio_disabling": "Выключение Wi-Fi...",
        "radio_enabled": "Wi-Fi включён",
        "radio_disabled": "Wi-Fi выключен",
        "radio_failed": "Не удалось переключить Wi-Fi: {error}",
        "radio_status_failed": "Не удалось узнать состояние Wi-Fi: {error}",
        "hidden_shown": "Сети без имени показаны",
        "hidden_suppressed": "Сети без имени скрыты",
        "not_connected": "Нет подключения к Wi-Fi",
        "not_saved": "{ssid} не является сохранённой сетью",
        "no_device": "У активного подключения нет устройства",
        "disconnecting": "Отключение {name}...",
        "disconnected": "Отключено от {name}",
        "disconnect_failed": "Не удалось отключить {name}: {error}",
        "forgetting": "Удаление {name}...",
        "forgotten": "Сеть {name} забыта",
        "forget_failed": "Не удалось забыть {name}: {error}",
        "action_pending": "Операция с {name} ещё выполняется. Повторите позже.",
        "unresolved": "Не удалось определить подключение. Обновите список и повторите.",
        "password_required": "Для {ssid} нужен пароль",
        "ssid_required": "Введите имя сети",
        "stored_credentials_failed": "Сохранённые данные для {ssid} не подошли. Введите пароль.",
        "connect_abandoned": "Ожидание {ssid} прервано",
        "operation_busy": "Предыдущая операция ещё выполняется",

        # ─── Help ───
        "help_title": "Клавиши",
        "help_text": (
            "Enter  подключить / подтвердить\n"
            "Esc    назад / отмена\n"
            "/      фильтр сетей\n"
            "R      повторный поиск\n"
            "D      отключиться\n"
            "F      забыть сохранённую сеть\n"
            "I      данные активного подключения\n"
            "P      сохранённые профили\n"
            "N      подключиться к скрытой сети\n"
            "T      включить/выключить Wi-Fi\n"
            "U      показать/скрыть сети без имени\n"
            "J/K    вниз/вверх\n"
            "Q      выход"
        ),

        # ─── Dependencies ───
        "deps_system": "Системные зависимости",
        "deps_python": "Python зависимости",
        "dep_name": "Имя",
        "dep_status": "Статус",
        "dep_description": "Описание",
        "dep_installed": "Установлен",
        "dep_missing": "Отсутствует",
        "dep_critical": "обязательный",
        "nmcli_missing": "nmcli не найден. Установите NetworkManager и повторите.",
    },
}

# ═══════════════════════════════════════════════════════════════
# Current language state
# ═══════════════════════════════════════════════════════════════

_current_lang = "en"


def get_lang() -> str:
    """Get current language code."""
    return _current_lang


def set_lang(lang: str, persist: bool = True) -> None:
    """Set current language. Saves to settings unless persist is False."""
    global _current_lang
    if lang in TRANSLATIONS:
        _current_lang = lang
        if persist:
            save_setting("language", lang)


def t(key: str, **kwargs) -> str:
    """Get translated string by key. Supports {placeholder} formatting."""
    text = TRANSLATIONS.get(_current_lang, TRANSLATIONS["en"]).get(key)
    if text is None:
        # Fallback to English
        text = TRANSLATIONS["en"].get(key, key)
    if kwargs:
        try:
            text = text.format(**kwargs)
        except (KeyError, IndexError):
            pass
    return text


def load_language() -> None:
    """Load saved language preference."""
    global _current_lang
    lang = load_settings().language
    if lang in TRANSLATIONS:
        _current_lang = lang
