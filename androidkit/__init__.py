"""Android build helpers: AAR extraction, final R.jar generation and native library zips."""

__version__ = "0.1.0"