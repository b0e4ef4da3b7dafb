

class CanBrowserError(Exception):
    """Base exception for all can_browser errors"""
    pass

class ConfigError(CanBrowserError):
    """Invalid or inconsistent global.json / source config"""
    pass

class DatasetLoadError(CanBrowserError):
    """
    Dataset could not be fetched or parsed.
    Missing file, HTTP failure, invalid JSON, payload not an object, etc.
    No index is built when this is raised.
    """
    pass
