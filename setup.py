"""fpoly setup script.

Install:                pip install .
Install for development: pip install -e .
"""

from setuptools import setup
import fpoly

with open('README.md', 'r') as f:
    LONG_DESCRIPTION = f.read()

setup(
    name='fpoly',
    version=fpoly.__version__,
    description='fpoly -- Formal power series and polynomial arithmetic in Python',
    long_description=LONG_DESCRIPTION,
    long_description_content_type='text/markdown',
    keywords=['polynomials', 'formal power series', 'NTT', 'number-theoretic transform',
              'Karatsuba', 'Newton iteration', 'finite fields', 'linear recurrences'],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Education',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Topic :: Software Development :: Libraries :: Python Modules'
    ],
    license=fpoly.__license__,
    packages=['fpoly'],
    platforms=['any'],
    install_requires=['gmpy2>=2.1', 'numpy'],
    python_requires='>=3.9'
)
