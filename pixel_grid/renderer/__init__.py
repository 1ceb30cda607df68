"""Rendering subpackage.

Turns grid colors into pixels on a raster surface. The renderer focuses on:

* Diff-based painting: only cells whose color changed since the previous
  frame are written (:mod:`pixel_grid.renderer.pixel_canvas`).
* Layer compositing, where the highest colored layer of a cell wins
  (:mod:`pixel_grid.renderer.layered_canvas`).
* NumPy backed RGBA surfaces exportable as Pillow images
  (:mod:`pixel_grid.renderer.surface`).
"""
