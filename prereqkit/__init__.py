"""
PrereqKit - installs the Android SDK platforms a source tree requires.

Scans a workspace for Android project files, makes sure an SDK is
available (installing one if allowed), installs every referenced
platform and exports ``ANDROID_HOME`` to later build steps.
"""

__version__ = "0.1.0"
