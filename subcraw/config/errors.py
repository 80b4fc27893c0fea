class ConfigurationError(Exception):
    """Некорректная конфигурация запуска: категория, переменные окружения или файл."""
