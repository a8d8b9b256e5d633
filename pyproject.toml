[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aesvault"
version = "1.0.0"
description = "Password-based AES encryption of files and folders in an HMAC-authenticated container"
requires-python = ">=3.10"
dependencies = []
keywords = ["aes", "encryption", "sha256", "hmac", "7z", "file-encryption"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
aesvault = "aesvault.cli:main"
aesvault-encrypt = "aesvault.cli:encrypt_main"
aesvault-decrypt = "aesvault.cli:decrypt_main"

[tool.hatch.build.targets.wheel]
packages = ["aesvault"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
