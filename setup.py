from glob import glob
from setuptools import setup


setup(
    name='handcalc',
    version='0.1.0',
    description='Hand calculator engine',
    install_requires=[
        'regex',
        'prompt_toolkit',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
            'bandit',
            'mypy',
            'safety',
        ],
    },
    packages=['handcalc'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    scripts=glob('bin/*'),
    license='ISC',
)
