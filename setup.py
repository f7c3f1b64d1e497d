#!/usr/bin/env python

if __name__ == '__main__':
    import io
    import os
    import re

    import setuptools

    here = os.path.abspath(os.path.dirname(__file__))

    with io.open(os.path.join(here, 'src', 'scanfield', '__init__.py'), encoding='utf-8') as stream:
        version = re.search(r"^__version__ = '([^']+)'", stream.read(), re.MULTILINE).group(1)

    setuptools.setup(
        name='scanfield',
        version=version,
        license='BSD-2-Clause',
        description='String scanning primitives and reflection over named fields',
        author='Andrea Zoppi',
        classifiers=[
            'Development Status :: 3 - Alpha',
            'Intended Audience :: Developers',
            'License :: OSI Approved :: BSD License',
            'Operating System :: OS Independent',
            'Programming Language :: Python :: 3',
            'Programming Language :: Python :: 3 :: Only',
            'Topic :: Software Development :: Libraries :: Python Modules',
            'Topic :: Text Processing',
        ],
        package_dir={'': 'src'},
        packages=setuptools.find_packages('src'),
        python_requires='>=3.8',
        install_requires=[],
        extras_require={
            'testing': [
                'pytest',
            ],
        },
        zip_safe=False,
    )
