"""Derived geometry for decoded 3DS triangle meshes.

Computes, for a TriangleMesh:
    - unit face normals, normalize(cross(v0 - v2, v1 - v0))
    - per face-vertex normals averaged over adjacent faces that share a
      smoothing group bit with the face (hard edges everywhere when the
      mesh has no smoothing data)
    - per face-vertex tangents and binormals from texture coordinate
      deltas, averaged with the same smoothing rule

Outputs use a face-vertex layout: 9 floats per face, three xyz vectors in
the order of the face's vertex slots. The same vertex can therefore carry
different normals for different faces.

Degenerate input (zero-area faces, missing or collapsed UVs) produces zero
vectors rather than errors.
"""

import logging

import numpy as np

_log = logging.getLogger(__name__)


def _normalize_rows(vectors):
    """Normalize each row in place; rows of zero length stay zero."""
    lengths = np.sqrt(np.einsum('ij,ij->i', vectors, vectors))
    nonzero = lengths > 0.0
    vectors[nonzero] /= lengths[nonzero, None]
    return vectors


class MeshGeometryGenerator:
    """Computes normals, tangents and binormals for triangle meshes.

    Scratch buffers (face vectors, per-vertex smoothing group counts and
    offsets, slots sorted by vertex) live on the instance and only ever
    grow, so processing the many meshes of one file does not reallocate
    them. An instance must not be shared between threads.
    """

    # Upper bound on (group, neighbour) pairs held at once while smoothing
    pair_batch = 1 << 18

    def __init__(self):
        self._face_vectors = np.zeros((0, 3), dtype=np.float64)
        self._vertex_counts = np.zeros(0, dtype=np.int64)
        self._vertex_offsets = np.zeros(1, dtype=np.int64)
        self._adjacency = np.zeros(0, dtype=np.int64)

    @property
    def scratch_capacity(self):
        """Current scratch sizes as (faces, vertices, adjacency entries)."""
        return (len(self._face_vectors), len(self._vertex_counts),
                len(self._adjacency))

    # ------------------------------------------------------------------
    # Scratch management
    # ------------------------------------------------------------------

    def _reserve(self, num_face, num_vertex):
        if len(self._face_vectors) < num_face:
            self._face_vectors = np.zeros((num_face, 3), dtype=np.float64)
        if len(self._vertex_counts) < num_vertex:
            self._vertex_counts = np.zeros(num_vertex, dtype=np.int64)
            self._vertex_offsets = np.zeros(num_vertex + 1, dtype=np.int64)
        if len(self._adjacency) < num_face * 3:
            self._adjacency = np.zeros(num_face * 3, dtype=np.int64)

    # ------------------------------------------------------------------
    # Input checks
    # ------------------------------------------------------------------

    @staticmethod
    def _faces_of(mesh):
        faces = np.asarray(mesh.face, dtype=np.int64).reshape(-1, 3)
        num_vertex = mesh.num_vertex
        if len(faces) and (faces.min() < 0 or faces.max() >= num_vertex):
            raise ValueError(
                f"Mesh has face indices outside 0..{num_vertex - 1}; "
                f"cannot generate normals"
            )
        return faces

    @staticmethod
    def _positions_of(mesh):
        return np.asarray(mesh.vertex, dtype=np.float64).reshape(-1, 3)

    # ------------------------------------------------------------------
    # Smoothing groups
    # ------------------------------------------------------------------

    def _group_slots(self, faces, smoothgroup, num_vertex):
        """Sort face-vertex slots into (vertex, smoothing mask) groups.

        Slots at one vertex whose faces carry the same mask always end up
        with the same averaged vector, so sums are formed once per group.
        Fills the vertex CSR scratch: adjacency lists every slot sorted by
        vertex then mask (slot s belongs to face s // 3), and the groups at
        vertex v are offsets[v]:offsets[v + 1].

        Returns (slot_group, group_vertex, group_mask, counts, offsets).
        """
        num_slots = len(faces) * 3
        self._reserve(len(faces), num_vertex)

        flat = faces.reshape(-1)
        masks = np.repeat(np.asarray(smoothgroup, dtype=np.uint32), 3)

        adjacency = self._adjacency[:num_slots]
        adjacency[:] = np.lexsort((masks, flat))
        sorted_vertex = flat[adjacency]
        sorted_mask = masks[adjacency]

        starts = np.ones(num_slots, dtype=bool)
        starts[1:] = ((sorted_vertex[1:] != sorted_vertex[:-1])
                      | (sorted_mask[1:] != sorted_mask[:-1]))
        slot_group = np.empty(num_slots, dtype=np.int64)
        slot_group[adjacency] = np.cumsum(starts) - 1
        group_vertex = sorted_vertex[starts]
        group_mask = sorted_mask[starts]

        counts = self._vertex_counts[:num_vertex]
        counts[:] = np.bincount(group_vertex, minlength=num_vertex)
        offsets = self._vertex_offsets[:num_vertex + 1]
        offsets[0] = 0
        np.cumsum(counts, out=offsets[1:])
        return slot_group, group_vertex, group_mask, counts, offsets

    def _smooth_groups(self, group_sums, group_vertex, group_mask, counts, offsets):
        """Sum, for every group, the groups at its vertex sharing a mask bit.

        (group, neighbour) pairs are built a batch of rows at a time, at most
        about pair_batch pairs per batch, so memory stays bounded when many
        differently smoothed faces meet at one vertex.
        """
        num_group = len(group_vertex)
        row_counts = counts[group_vertex]
        row_starts = offsets[group_vertex]
        row_ends = np.cumsum(row_counts)
        smoothed = np.zeros((num_group, 3), dtype=np.float64)

        start = 0
        while start < num_group:
            limit = row_ends[start] - row_counts[start] + self.pair_batch
            stop = max(int(np.searchsorted(row_ends, limit, side='right')), start + 1)
            reps = row_counts[start:stop]
            total = int(reps.sum())

            rows = np.repeat(np.arange(start, stop), reps)
            run_start = np.repeat(np.cumsum(reps) - reps, reps)
            cols = np.repeat(row_starts[start:stop], reps) + (np.arange(total) - run_start)
            keep = (group_mask[rows] & group_mask[cols]) != 0
            rows = rows[keep] - start
            cols = cols[keep]
            for axis in range(3):
                smoothed[start:stop, axis] = np.bincount(
                    rows, weights=group_sums[cols, axis], minlength=stop - start)
            start = stop
        return smoothed

    def _accumulate(self, mesh, faces, face_vectors):
        """Spread per-face vectors to the face-vertex layout and normalize.

        A slot gets its own face's vector plus those of the faces at the same
        vertex sharing a smoothing bit. Without smoothing data, or for faces
        with a zero mask, that is the face's own vector.
        """
        own = np.repeat(face_vectors, 3, axis=0)
        if not mesh.has_smoothing:
            return _normalize_rows(own)

        slot_group, group_vertex, group_mask, counts, offsets = self._group_slots(
            faces, mesh.smoothgroup, mesh.num_vertex)
        num_group = len(group_vertex)
        group_sums = np.empty((num_group, 3), dtype=np.float64)
        for axis in range(3):
            group_sums[:, axis] = np.bincount(
                slot_group, weights=own[:, axis], minlength=num_group)

        smoothed = self._smooth_groups(group_sums, group_vertex, group_mask,
                                       counts, offsets)
        result = smoothed[slot_group]
        hard = group_mask[slot_group] == 0
        result[hard] = own[hard]
        return _normalize_rows(result)

    # ------------------------------------------------------------------
    # Normals
    # ------------------------------------------------------------------

    def face_normals(self, mesh):
        """Return unit face normals as a (num_face, 3) float64 array."""
        faces = self._faces_of(mesh)
        return self._compute_face_normals(self._positions_of(mesh), faces).copy()

    def _compute_face_normals(self, positions, faces):
        num_face = len(faces)
        self._reserve(num_face, 0)
        v0 = positions[faces[:, 0]]
        v1 = positions[faces[:, 1]]
        v2 = positions[faces[:, 2]]
        normals = self._face_vectors[:num_face]
        normals[:] = np.cross(v0 - v2, v1 - v0)
        return _normalize_rows(normals)

    def calc_normals(self, mesh):
        """Fill mesh.normal with smoothing-group averaged normals."""
        faces = self._faces_of(mesh)
        if len(faces) == 0:
            mesh.normal = np.zeros(0, dtype=np.float32)
            return mesh.normal

        face_normals = self._compute_face_normals(self._positions_of(mesh), faces)
        normals = self._accumulate(mesh, faces, face_normals)
        mesh.normal = normals.astype(np.float32).reshape(-1)
        return mesh.normal

    # ------------------------------------------------------------------
    # Tangents / binormals
    # ------------------------------------------------------------------

    def _tex_coords_of(self, mesh):
        """Return (num_vertex, 2) texture coordinates for tangent solving.

        A mesh without texture coordinates gets a zero array assigned, which
        yields zero tangents. Short arrays are zero padded here only.
        """
        num_vertex = mesh.num_vertex
        if mesh.tex_coord is None:
            mesh.tex_coord = np.zeros(num_vertex * 2, dtype=np.float32)
        uvs = np.asarray(mesh.tex_coord, dtype=np.float64).reshape(-1, 2)
        if len(uvs) < num_vertex:
            _log.debug("Mesh has %d texture coordinates for %d vertices; "
                       "padding with zeros", len(uvs), num_vertex)
            padded = np.zeros((num_vertex, 2), dtype=np.float64)
            padded[:len(uvs)] = uvs
            uvs = padded
        return uvs

    @staticmethod
    def _face_tangents(positions, uvs, faces):
        """Per-face (tangent, binormal), each (num_face, 3), orthonormalised."""
        p0 = positions[faces[:, 0]]
        edge0 = positions[faces[:, 1]] - p0
        edge1 = positions[faces[:, 2]] - p0

        t0 = uvs[faces[:, 0]]
        du0, dv0 = (uvs[faces[:, 1]] - t0).T
        du1, dv1 = (uvs[faces[:, 2]] - t0).T

        det = du0 * dv1 - dv0 * du1
        solvable = det != 0.0
        inv = np.zeros_like(det)
        inv[solvable] = 1.0 / det[solvable]

        tangents = (edge0 * dv1[:, None] - edge1 * dv0[:, None]) * inv[:, None]
        binormals = (edge1 * du0[:, None] - edge0 * du1[:, None]) * inv[:, None]
        _normalize_rows(tangents)
        _normalize_rows(binormals)

        # Re-derive binormal from the implied normal so the basis is orthogonal.
        normals = _normalize_rows(np.cross(tangents, binormals))
        binormals = np.cross(normals, tangents)
        return tangents, binormals

    def calc_tangents(self, mesh):
        """Fill mesh.tangent and mesh.binormal (9 floats per face each)."""
        faces = self._faces_of(mesh)
        num_face = len(faces)
        uvs = self._tex_coords_of(mesh)
        if num_face == 0:
            mesh.tangent = np.zeros(0, dtype=np.float32)
            mesh.binormal = np.zeros(0, dtype=np.float32)
            return mesh.tangent, mesh.binormal

        tangents, binormals = self._face_tangents(self._positions_of(mesh), uvs, faces)
        mesh.tangent = self._accumulate(mesh, faces, tangents).astype(np.float32).reshape(-1)
        mesh.binormal = self._accumulate(mesh, faces, binormals).astype(np.float32).reshape(-1)
        return mesh.tangent, mesh.binormal

    def calc_all(self, mesh, tangents=True):
        """Normals, plus tangents/binormals when ``tangents`` is set."""
        self.calc_normals(mesh)
        if tangents:
            self.calc_tangents(mesh)
        return mesh


def calc_normals(mesh):
    """Compute mesh.normal with a fresh generator."""
    return MeshGeometryGenerator().calc_normals(mesh)


def calc_tangents(mesh):
    """Compute mesh.tangent and mesh.binormal with a fresh generator."""
    return MeshGeometryGenerator().calc_tangents(mesh)


def calc_all_normals(object_mesh, tangents=False):
    """Generate derived geometry for every mesh of a decoded file.

    Meshes flagged invalid by the reader (face index out of range) are
    skipped with a warning. Returns the number of meshes processed.
    """
    generator = MeshGeometryGenerator()
    processed = 0
    for block, mesh in object_mesh.iter_meshes():
        if not mesh.valid:
            _log.warning("Skipping invalid mesh in object %r", block.name)
            continue
        generator.calc_all(mesh, tangents=tangents)
        processed += 1
    _log.debug("Generated normals for %d mesh(es)", processed)
    return processed
