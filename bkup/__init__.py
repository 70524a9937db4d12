"""bkup - one-way directory backup (source wins when strictly newer)"""

__version__ = "0.3.0"
