from setuptools import setup, find_packages


setup(
    name='nnreslice',
    version='0.1a',
    packages=find_packages(exclude=['tests', 'tests.*']),
    license='MIT',
    author='Yael Balbastre',
    author_email='yael.balbastre@gmail.com',
    description='Reslicing of volumes onto arbitrary voxel grids, '
                'with anti-aliasing oversampling',
    python_requires='>=3.7',
    install_requires=['nibabel', 'numpy', 'scipy'],
    extras_require={'test': ['pytest']},
)
