"""UniDirectory - university search and favorites API"""

__version__ = "1.0.0"
