"""Matte Maker: compose photo-collage mattes and render them with ImageMagick."""

__version__ = "0.3.0"
