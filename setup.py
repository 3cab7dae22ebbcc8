#!/usr/bin/env python

from setuptools import setup

VERSION = (1, 0, 0)

setup(
  name             = 'jstr',
  version          = ".".join(str(x) for x in VERSION),
  description      = 'Modified UTF-8 strings for JVM class files',
  long_description = open("README.rst").read(),
  license          = 'GPLv3',
  packages         = ['jstr', 'jstrcheck_core'],
  py_modules       = ['jstrcheck'],
  python_requires  = '>=3.8',
  install_requires = ['progressbar2'],
  extras_require   = {'test': ['pytest']},
  entry_points     = {'console_scripts': ['jstrcheck = jstrcheck:run']},
  classifiers      = [
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries :: Python Modules"
  ]
)
