from setuptools import setup, find_packages
from rxexchange import __prog_name__, __prog_desc__, __version__, __author_name__, __author_email__, __copyright__

setup(name=__prog_name__,
      version=__version__[1:].split('-')[0],
      author=__author_name__,
      author_email=__author_email__,
      license=__copyright__,
      description=__prog_desc__,
      packages=find_packages(exclude=['tests', 'tests.*']),
      python_requires='>=3.10',
      install_requires=[
          'PyQt6',
          'adif_file',
      ],
      extras_require={
          'test': ['pytest'],
      },
      entry_points={
          'console_scripts': [
              'rxexchange=rxexchange.__main__:main',
          ],
      })
