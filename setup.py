# -*- coding: utf-8 -*-

from setuptools import setup, find_packages

setup(
    name='bowlpool',
    version='0.1.0',
    packages=find_packages(include=['bowlpool']),
    url='',
    author='',
    author_email='',
    description='Bowl Pool - scoring and ranking for a college football bowl game prediction pool',
    python_requires='>=3.10',
    install_requires=['regex',
                      'pyyaml',
                      'peewee',
                      'requests',
                      'python-dotenv',
                      'google-auth'],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'game       = bowlpool.game:main',
            'cfbd       = bowlpool.cfbd:main',
            'sheets     = bowlpool.sheets:main',
            'pool       = bowlpool.pool:main',
            'pool_score = bowlpool.pool_score:main'
        ],
    }
)
