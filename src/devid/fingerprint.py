"""Generate randomized device fingerprints and the request headers built from them."""

import json
import logging
import random
import re
import time
import uuid

from devid.config import resolve_product_version

log = logging.getLogger(__name__)

PRODUCT = "antigravity"

OS_VERSIONS = {
    "darwin": ["10.15.7", "11.6.8", "12.6.3", "13.5.2", "14.2.1", "14.5"],
    "win32": ["10.0.19041", "10.0.19042", "10.0.19043", "10.0.22000", "10.0.22621", "10.0.22631"],
    "linux": ["5.15.0", "5.19.0", "6.1.0", "6.2.0", "6.5.0", "6.6.0"],
}

PLATFORMS = {
    "darwin": "MACOS",
    "win32": "WINDOWS",
    "linux": "LINUX",
}
PLATFORM_UNSPECIFIED = "PLATFORM_UNSPECIFIED"

ARCHITECTURES = ["x64", "arm64"]

IDE_TYPES = [
    "IDE_UNSPECIFIED",
    "VSCODE",
    "INTELLIJ",
    "ANDROID_STUDIO",
    "CLOUD_SHELL_EDITOR",
]

SDK_CLIENTS = [
    "google-cloud-sdk vscode_cloudshelleditor/0.1",
    "google-cloud-sdk vscode/1.86.0",
    "google-cloud-sdk vscode/1.87.0",
    "google-cloud-sdk intellij/2024.1",
    "google-cloud-sdk android-studio/2024.1",
    "gcloud-python/1.2.0 grpc-google-iam-v1/0.12.6",
]

PLUGIN_TYPE = "GEMINI"

def _now_ms():
    return int(time.time() * 1000)


class FingerprintFactory:
    """Builds fingerprints from an injectable random source.

    ``rng`` defaults to ``random.SystemRandom`` (backed by ``os.urandom``);
    pass a seeded ``random.Random`` for reproducible output. ``clock`` returns
    epoch milliseconds.
    """

    def __init__(self, rng=None, clock=None, version=None, product=PRODUCT):
        self.rng = rng or random.SystemRandom()
        self.clock = clock or _now_ms
        self.version = version or resolve_product_version()
        self.product = product
        self._ua_pattern = re.compile(rf"^{re.escape(product)}/[\d.]+ (.+)$")

    def _uuid4(self):
        return uuid.UUID(int=self.rng.getrandbits(128), version=4)

    def _hex(self, nbytes):
        return self.rng.getrandbits(nbytes * 8).to_bytes(nbytes, "big").hex()

    def user_agent(self, platform_arch):
        return f"{self.product}/{self.version} {platform_arch}"

    def generate(self):
        platform = self.rng.choice(list(PLATFORMS))
        arch = self.rng.choice(ARCHITECTURES)
        os_version = self.rng.choice(OS_VERSIONS.get(platform, OS_VERSIONS["linux"]))

        fp = {
            "deviceId": str(self._uuid4()),
            "sessionToken": self._hex(16),
            "userAgent": self.user_agent(f"{platform}/{arch}"),
            "apiClient": self.rng.choice(SDK_CLIENTS),
            "clientMetadata": {
                "ideType": self.rng.choice(IDE_TYPES),
                "platform": PLATFORMS.get(platform, PLATFORM_UNSPECIFIED),
                "pluginType": PLUGIN_TYPE,
                "osVersion": os_version,
                "arch": arch,
                "sqmId": "{" + str(self._uuid4()).upper() + "}",
            },
            "quotaUser": f"device-{self._hex(8)}",
            "createdAt": self.clock(),
        }
        log.debug("generated fingerprint %s (%s)", fp["deviceId"], fp["userAgent"])
        return fp

    def build_headers(self, fp):
        if not fp:
            return {}
        return {
            "User-Agent": fp["userAgent"],
            "X-Goog-Api-Client": fp["apiClient"],
            "Client-Metadata": json.dumps(fp["clientMetadata"], separators=(",", ":")),
            "X-Goog-QuotaUser": fp["quotaUser"],
            "X-Client-Device-Id": fp["deviceId"],
        }

    def update_version(self, fp):
        """Re-stamp the userAgent with the running version.

        Identity fields are never touched. Anything that does not look like
        ``<product>/<version> <platform>/<arch>`` comes back as-is.
        """
        if not isinstance(fp, dict) or not isinstance(fp.get("userAgent"), str):
            return fp
        match = self._ua_pattern.match(fp["userAgent"])
        if not match:
            return fp
        expected = self.user_agent(match.group(1))
        if fp["userAgent"] == expected:
            return fp
        return {**fp, "userAgent": expected}


_default = None


def default_factory():
    global _default
    if _default is None:
        _default = FingerprintFactory()
    return _default


def generate_fingerprint():
    return default_factory().generate()


def build_fingerprint_headers(fp):
    return default_factory().build_headers(fp)


def update_fingerprint_version(fp):
    return default_factory().update_version(fp)
