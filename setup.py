#!/usr/bin/env python
from setuptools import setup

requires = ['func_prototypes', 'docopt', 'delnone', 'tqdm', 'markdown-it-py>=3.0']
test_requires = ['pytest']

setup(
    name='foldnotes',
    version='0.1.0',
    author='Andrew Thomson',
    author_email='athomsonguy@gmail.com',
    packages=['foldnotes'],
    install_requires = requires,
    tests_require = test_requires,
    extras_require = {
      'test': test_requires,
    },
    entry_points = {
      'console_scripts': [
        'foldnotes = foldnotes.ui:ui_main',
        ],
    },
    license='MIT',
    description='read-only store of markdown articles which checks them for broken links and images.',
    long_description_content_type='text/markdown',
    long_description=open('README.md').read(),
    classifiers=[
        'Development Status :: 4 - Beta',
        'License :: OSI Approved :: MIT License',
        'Topic :: Text Processing :: Markup :: Markdown',
        'Programming Language :: Python :: 3',
    ],
)
