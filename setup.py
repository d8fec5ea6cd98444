"""
bfcrypt setup script
"""
#=============================================================================
# init script env -- ensure cwd = root of source dir
#=============================================================================
import os
root_dir = os.path.abspath(os.path.join(__file__, ".."))
os.chdir(root_dir)

#=============================================================================
# imports
#=============================================================================
import re
from setuptools import setup, find_packages

#=============================================================================
# version string
#=============================================================================

# read version without importing bfcrypt, which needs typing_extensions
with open(os.path.join(root_dir, "bfcrypt", "__init__.py"), encoding="utf-8") as fh:
    version = re.search(r'^__version__ = "([^"]+)"', fh.read(), re.M).group(1)

#=============================================================================
# static text
#=============================================================================
SUMMARY = "pure-python implementation of the bcrypt password hash"

DESCRIPTION = """\
bfcrypt hashes and verifies passwords using OpenBSD's bcrypt algorithm,
without any compiled extensions. It understands the $2$, $2a$, $2b$, $2x$
and $2y$ hash formats, and produces hashes compatible with other bcrypt
implementations.
"""

KEYWORDS = """\
password secret hash security
bcrypt blowfish eksblowfish
"""

CLASSIFIERS = """\
Intended Audience :: Developers
License :: OSI Approved :: BSD License
Natural Language :: English
Operating System :: OS Independent
Programming Language :: Python :: 3
Programming Language :: Python :: Implementation :: CPython
Programming Language :: Python :: Implementation :: PyPy
Topic :: Security :: Cryptography
Topic :: Software Development :: Libraries
""".splitlines()

if '.dev' in version:
    CLASSIFIERS.append("Development Status :: 3 - Alpha")
else:
    CLASSIFIERS.append("Development Status :: 5 - Production/Stable")

#=============================================================================
# run setup
#=============================================================================
setup(
    # package info
    packages=find_packages(root_dir, include=["bfcrypt", "bfcrypt.*"]),
    zip_safe=True,
    python_requires=">=3.9",

    # metadata
    name="bfcrypt",
    version=version,
    license="BSD",

    description=SUMMARY,
    long_description=DESCRIPTION,
    keywords=KEYWORDS,
    classifiers=CLASSIFIERS,

    install_requires=[
        "typing_extensions>=4.0",
    ],
    extras_require={
        "tests": [
            "pytest",
            "pytest-archon",
            "bcrypt>=3.1.0",
        ],
    },
)

#=============================================================================
# eof
#=============================================================================
