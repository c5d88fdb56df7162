import argparse
import logging
import multiprocessing as mp
import os
import time

from PIL import Image
import numpy as np

from camera import Camera
from color_map import ColorMap
from light import Light
from material import Material
from scene import Scene
from shading import shade
from surfaces.ellipsoid import Ellipsoid
from surfaces.raw_ct_mask import RawCtMask
from surfaces.sphere import Sphere

logger = logging.getLogger(__name__)


# Color of pixels whose primary ray hits nothing
BACKGROUND = np.array([0.2, 0.2, 0.2])


class RayTracer:
    def __init__(self, scene):
        self.scene = scene

    def trace_pixel(self, camera, i, j, width, height):
        """Color of pixel (i, j). The camera must already be normalized."""
        ray = camera.primary_ray(i, j, width, height)
        intersection = self.scene.find_nearest(ray, camera.front_plane_distance, camera.back_plane_distance)

        if not intersection.is_hit:
            return BACKGROUND.copy()
        return shade(self.scene, intersection, camera.position)

    def render_rows(self, camera, width, height, y_start, y_end):
        """Render rows [y_start, y_end) into a (rows, width, 3) array."""
        colors = np.zeros((y_end - y_start, width, 3))
        for j in range(y_start, y_end):
            for i in range(width):
                colors[j - y_start, i] = self.trace_pixel(camera, i, j, width, height)
        return colors

    def render(self, camera, width, height):
        """
        Render the scene sequentially.

        Returns:
            (height, width, 3) float array; image[j, i] is pixel (i, j).
        """
        _check_size(width, height)
        start_time = time.time()

        camera.normalize()
        logger.info("Camera setup complete. Direction: %s, Right: %s, Up: %s",
                    camera.direction, camera.right, camera.up)

        image = np.zeros((height, width, 3))
        for j in range(height):
            row_start = time.time()
            image[j:j + 1] = self.render_rows(camera, width, height, j, j + 1)
            logger.debug("Row %d/%d - Row time: %.2fs", j + 1, height, time.time() - row_start)

        logger.info("Rendering complete in %.1fs", time.time() - start_time)
        return image

    def render_parallel(self, camera, width, height, num_workers=None):
        """
        Render the scene using multiprocessing (parallel row-based rendering).

        Every worker renders a disjoint range of rows, so the result is the
        same as render().
        """
        _check_size(width, height)
        if num_workers is None:
            num_workers = mp.cpu_count()
        if num_workers < 1:
            raise ValueError(f"num_workers must be at least 1, got {num_workers}")

        start_time = time.time()
        camera.normalize()

        # Divide rows into chunks, 4 per worker for load balancing
        rows_per_chunk = max(1, height // (num_workers * 4))
        chunks = []
        for y_start in range(0, height, rows_per_chunk):
            y_end = min(y_start + rows_per_chunk, height)
            chunks.append((self, camera, width, height, y_start, y_end))

        logger.info("Parallel rendering %dx%d with %d workers in %d chunks",
                    width, height, num_workers, len(chunks))

        with mp.Pool(num_workers) as pool:
            results = pool.map(_render_row_chunk, chunks)

        image = np.zeros((height, width, 3))
        for y_start, y_end, colors in results:
            image[y_start:y_end] = colors

        logger.info("Parallel rendering complete in %.1fs", time.time() - start_time)
        return image


def _render_row_chunk(args):
    """Worker function rendering one chunk of rows, called by the multiprocessing pool."""
    tracer, camera, width, height, y_start, y_end = args
    return y_start, y_end, tracer.render_rows(camera, width, height, y_start, y_end)


def _check_size(width, height):
    if width <= 0 or height <= 0:
        raise ValueError(f"Image size must be positive, got {width}x{height}")


def save_image(image_array, output_path):
    """Save the rendered image to a file."""
    # Clamp values to [0, 1] then scale to [0, 255]
    image_array = np.clip(image_array, 0, 1)
    image_array = (image_array * 255).astype(np.uint8)

    image = Image.fromarray(image_array)
    image.save(output_path)
    logger.info("Image saved to %s", output_path)


def parse_scene_file(file_path):
    """
    Parse the scene file and return the camera and the scene.

    Line types (numbers are whitespace separated, '#' starts a comment):
        cam px py pz dx dy dz ux uy uz vp_distance vp_width vp_height front back
        mtl ar ag ab dr dg db sr sg sb shininess
        lgt px py pz ar ag ab dr dg db sr sg sb intensity
        ell cx cy cz ax ay az radius material r g b
        sph cx cy cz radius material r g b
        msk dat_file raw_file px py pz scale [material]

    Materials are referenced by 1-based index in order of appearance;
    index 0 means no material. Mask data paths are relative to the scene file.
    """
    camera = None
    materials = []
    surfaces = []
    lights = []
    base_dir = os.path.dirname(os.path.abspath(file_path))

    with open(file_path, 'r') as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            parts = line.split()
            obj_type = parts[0]

            if obj_type == "msk":
                dat_file = os.path.join(base_dir, parts[1])
                raw_file = os.path.join(base_dir, parts[2])
                params = [float(p) for p in parts[3:]]
                material = _material_at(materials, params[4], line_no) if len(params) > 4 else None
                surfaces.append(RawCtMask.from_files(dat_file, raw_file, params[:3], params[3],
                                                     ColorMap(), material))
                continue

            params = [float(p) for p in parts[1:]]
            if obj_type == "cam":
                camera = Camera(params[:3], params[3:6], params[6:9], *params[9:14])
            elif obj_type == "mtl":
                materials.append(Material(params[:3], params[3:6], params[6:9], params[9]))
            elif obj_type == "lgt":
                lights.append(Light(params[:3], params[3:6], params[6:9], params[9:12], params[12]))
            elif obj_type == "ell":
                material = _material_at(materials, params[7], line_no)
                surfaces.append(Ellipsoid(params[:3], params[3:6], params[6], material, params[8:11]))
            elif obj_type == "sph":
                material = _material_at(materials, params[4], line_no)
                surfaces.append(Sphere(params[:3], params[3], material, params[5:8]))
            else:
                raise ValueError("Unknown object type: {} (line {})".format(obj_type, line_no))

    if camera is None:
        raise ValueError("Scene file {} defines no camera".format(file_path))

    return camera, Scene(surfaces, lights)


def _material_at(materials, index, line_no):
    index = int(index)
    if index == 0:
        return None
    if not 1 <= index <= len(materials):
        raise ValueError("Unknown material index {} (line {})".format(index, line_no))
    return materials[index - 1]


def main(argv=None):
    parser = argparse.ArgumentParser(description='Python Ray Caster')
    parser.add_argument('scene_file', type=str, help='Path to the scene file')
    parser.add_argument('output_image', type=str, help='Name of the output image file')
    parser.add_argument('--width', type=int, default=500, help='Image width')
    parser.add_argument('--height', type=int, default=500, help='Image height')
    parser.add_argument('--workers', type=int, default=None,
                        help='Number of worker processes (default: CPU count, 1 renders sequentially)')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    # Parse the scene file
    camera, scene = parse_scene_file(args.scene_file)
    logger.info("Scene loaded: %d surfaces, %d lights", len(scene.surfaces), len(scene.lights))
    logger.info("Rendering %dx%d image...", args.width, args.height)

    tracer = RayTracer(scene)
    if args.workers == 1:
        image_array = tracer.render(camera, args.width, args.height)
    else:
        image_array = tracer.render_parallel(camera, args.width, args.height, args.workers)

    # Save the output image
    save_image(image_array, args.output_image)


if __name__ == '__main__':
    main()
