from setuptools import setup
import io


with io.open('README.md', encoding='utf-8') as f:
    long_description = f.read()

with io.open('requirements.txt', encoding='utf-8') as f:
    requirements = [r for r in f.read().split('\n') if len(r)]


setup(name='pyhydra',
      version='0.3.0',
      description='Head lifecycle controller and client library for Hydra head nodes',
      long_description=long_description,
      long_description_content_type='text/markdown',
      license='MIT',
      packages=['pyhydra', 'pyhydra.client', 'pyhydra.proto'],
      scripts=[],
      zip_safe=True,
      python_requires='>=3.10',
      entry_points={
          'console_scripts': [
              'hydra-wrangler=pyhydra.client.__main__:main',
          ],
      },
      extras_require={
          'test': ['pytest'],
      },
      install_requires=requirements)
