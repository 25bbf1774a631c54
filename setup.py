#!/usr/bin/env python
from setuptools import setup

def find_version(path):
    import re
    # path shall be a plain ascii text file.
    s = open(path, 'rt').read()
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]",
                              s, re.M)
    if version_match:
        return version_match.group(1)
    raise RuntimeError("Version not found")

setup(name="hzline", version=find_version("hzline/version.py"),
      description="Hager-Zhang line search on abstract vector spaces in Python",
      zip_safe=True, # this should be pure python
      packages=["hzline",
                "hzline.linesearch",
                "hzline.testing",
               ],
      license='GPLv3',
      install_requires=['numpy',
                        'scipy', # test problems in hzline.testing
                       ],
      extras_require={'test': ['pytest']},
      )
