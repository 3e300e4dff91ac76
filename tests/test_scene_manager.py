"""Tests for the SceneManager.

Tests cover:
- Registering materials, spheres and lights
- Validation of material references and vectors
- Serialization to and from dictionaries
"""

import json

import pytest


class TestSceneManagerBuild:
    """Tests for building a scene."""

    def test_new_manager_clears_fields(self):
        from src.whitted.scene.intersection import add_sphere, get_sphere_count, vec3
        from src.whitted.scene.lights import add_light, get_light_count
        from src.whitted.scene.manager import SceneManager

        add_sphere(vec3(0.0, 0.0, 5.0), 1.0)
        add_light((0.0, 0.0, 0.0), 1.0)

        SceneManager()
        assert get_sphere_count() == 0
        assert get_light_count() == 0

    def test_add_material_and_sphere(self):
        from src.whitted.scene.manager import SceneManager

        scene = SceneManager()
        ivory = scene.add_material(1.0, (0.6, 0.3, 0.1, 0.0), (0.4, 0.4, 0.3), 50.0)
        idx = scene.add_sphere((-3.0, 0.0, 16.0), 2.0, ivory)

        assert ivory == 0
        assert idx == 0
        assert scene.get_material_count() == 1
        assert scene.get_sphere_count() == 1
        assert scene.spheres[0].center == (-3.0, 0.0, 16.0)
        assert scene.get_material_info(ivory).params.specular_exponent == 50.0
        assert scene.get_material_info(7) is None

    def test_add_sphere_with_material(self):
        from src.whitted.materials.phong import GLASS, IVORY
        from src.whitted.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere_with_material((0.0, 0.0, 10.0), 1.0, IVORY)
        sphere_idx, mat_id = scene.add_sphere_with_material((-1.0, -1.5, 12.0), 2.0, GLASS)

        assert (sphere_idx, mat_id) == (1, 1)
        assert scene.materials[1].params == GLASS

    def test_add_light(self):
        from src.whitted.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_light((-20.0, 20.0, -20.0), 1.5)
        scene.add_light([30, 50, 25], 1.8)

        assert scene.get_light_count() == 2
        assert scene.lights[1].position == (30.0, 50.0, 25.0)

    def test_invalid_material_id(self):
        from src.whitted.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.add_sphere((0.0, 0.0, 5.0), 1.0, 0)

    def test_invalid_center(self):
        from src.whitted.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_material(1.0, (1.0, 0.0, 0.0, 0.0), (0.5, 0.5, 0.5), 0.0)
        with pytest.raises(ValueError, match="needs 3 components"):
            scene.add_sphere((0.0, 5.0), 1.0, mat)

    def test_clear(self):
        from src.whitted.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_material(1.0, (1.0, 0.0, 0.0, 0.0), (0.5, 0.5, 0.5), 0.0)
        scene.add_sphere((0.0, 0.0, 5.0), 1.0, mat)
        scene.add_light((0.0, 0.0, 0.0), 1.0)
        scene.clear()

        assert scene.get_sphere_count() == 0
        assert scene.get_material_count() == 0
        assert scene.get_light_count() == 0
        assert scene.spheres == []

    def test_capacity_information(self):
        from src.whitted.scene.manager import SceneManager

        assert SceneManager.get_max_spheres() == 1024
        assert SceneManager.get_max_materials() == 256
        assert SceneManager.get_max_lights() == 64


class TestSceneManagerSerialization:
    """Tests for dictionary import and export."""

    def test_round_trip_through_json(self):
        from src.whitted.scene.manager import SceneManager

        scene = SceneManager()
        mirror = scene.add_material(1.0, (0.0, 10.0, 0.8, 0.0), (1.0, 1.0, 1.0), 1425.0)
        scene.add_sphere((7.0, 5.0, 18.0), 4.0, mirror)
        scene.add_light((30.0, 20.0, -30.0), 1.7)

        data = json.loads(json.dumps(scene.to_dict()))

        restored = SceneManager()
        restored.from_dict(data)

        assert restored.to_dict() == scene.to_dict()
        assert restored.get_sphere_count() == 1
        assert restored.get_light_count() == 1

    def test_from_dict_replaces_scene(self):
        from src.whitted.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_light((0.0, 0.0, 0.0), 1.0)
        scene.add_light((1.0, 0.0, 0.0), 1.0)

        scene.from_dict({"lights": [{"position": [0.0, 5.0, 0.0], "intensity": 2.0}]})
        assert scene.get_light_count() == 1
        assert scene.lights[0].intensity == 2.0

    def test_from_dict_rejects_dangling_material(self):
        from src.whitted.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.from_dict({"spheres": [{"center": [0, 0, 5], "radius": 1, "material_id": 3}]})

