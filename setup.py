import os
import re

import setuptools


def read(fname):
   return open(os.path.join(os.path.dirname(__file__), fname)).read()


def version():
   return re.search(r'^__version__ = "([^"]+)"', read('hilly_sounds/__init__.py'), re.M).group(1)


setuptools.setup(
   name='hilly-sounds',
   version=version(),
   description='Encode audio into images along a Hilbert curve, and decode them back',
   long_description=read('README.md'),
   long_description_content_type="text/markdown",
   license="BSD2",
   keywords="sound image hilbert sonification",
   packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
   install_requires=[
      'numpy',
      'soundfile',
      'Pillow',
      'hilbertcurve>=2.0',
      'tomli-w',
   ],
   extras_require={
      'play': ['sounddevice'],
      'test': ['pytest'],
   },
   entry_points={
      'console_scripts': [
         'hscli=hilly_sounds.cli:main',
      ],
   },
   classifiers=[
      "Programming Language :: Python",
      "Programming Language :: Python :: 3",
      "Operating System :: OS Independent",
    ],
   python_requires='>=3.11',
)
