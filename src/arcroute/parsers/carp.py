"""Parser for mixed CARP instance files (.dat)."""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

from arcroute.exceptions import InvalidInstanceError
from arcroute.models import ServiceCatalog, ServiceKind
from arcroute.network.graph import Network

from .models import CARPInstance

logger = logging.getLogger(__name__)

# Section headers, matched on the first token of a line
SECTIONS = {
    'ReN.': 'required_nodes',
    'ReE.': 'required_edges',
    'ReA.': 'required_arcs',
    'EDGE': 'edges',
    'ARC': 'arcs',
}

HEADER_FIELDS = {
    'name': 'name',
    'optimal value': 'optimal_value',
    '#vehicles': 'vehicles',
    'capacity': 'capacity',
    'depot node': 'depot',
    '#nodes': 'nodes',
}

_NUMBER = re.compile(r'-?\d+')


class CARPParser:
    """Parser for MCGRP-style CARP instance files.

    The file starts with ``Key: value`` header lines (capacity, depot node,
    node count, ...) followed by sections of required nodes (``ReN.``),
    required edges (``ReE.``), non-required edges (``EDGE``), required arcs
    (``ReA.``) and non-required arcs (``ARC``). Node ids in the file are
    1-based. Services get sequential ids from 1 in file order.
    """

    def __init__(self, file_path: str | Path):
        """Initialize parser with instance file path."""
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"CARP instance file not found: {file_path}")

        self.instance_name = self.file_path.stem

    def parse(self) -> CARPInstance:
        """Parse the instance file."""
        lines = self.file_path.read_text().splitlines()
        header = self._parse_header(lines)

        node_count = self._require_int(header, 'nodes', '#Nodes')
        capacity = self._require_int(header, 'capacity', 'Capacity')
        depot_id = self._require_int(header, 'depot', 'Depot Node')
        if node_count <= 0 or capacity <= 0 or not 1 <= depot_id <= node_count:
            raise InvalidInstanceError(
                f"{self.file_path.name}: invalid header (nodes={node_count}, "
                f"capacity={capacity}, depot={depot_id})"
            )

        network = Network(node_count)
        catalog = ServiceCatalog()
        self._parse_sections(lines, network, catalog)

        logger.info(
            f"Parsed CARP instance {self.instance_name}: {node_count} nodes, "
            f"{len(network.links)} links, {len(catalog)} services, capacity={capacity}"
        )

        return CARPInstance(
            name=header.get('name') or self.instance_name,
            source_file=self.file_path,
            node_count=node_count,
            capacity=capacity,
            depot=depot_id - 1,
            network=network,
            catalog=catalog,
            optimal_value=self._optional_int(header, 'optimal_value'),
            vehicles=self._optional_int(header, 'vehicles'),
        )

    def _parse_header(self, lines: List[str]) -> Dict[str, str]:
        header = {}
        for line in lines:
            tokens = line.split()
            if tokens and tokens[0] in SECTIONS:
                break
            if ':' not in line:
                continue
            key, value = line.split(':', 1)
            field = HEADER_FIELDS.get(key.strip().lower())
            if field:
                header[field] = value.strip()
        return header

    def _require_int(self, header: Dict[str, str], field: str, label: str) -> int:
        value = self._optional_int(header, field)
        if value is None:
            raise InvalidInstanceError(f"{self.file_path.name}: missing '{label}:' header")
        return value

    @staticmethod
    def _optional_int(header: Dict[str, str], field: str) -> Optional[int]:
        match = _NUMBER.search(header.get(field, ''))
        return int(match.group()) if match else None

    def _parse_sections(self, lines: List[str], network: Network, catalog: ServiceCatalog) -> None:
        section = None
        service_id = 1
        for line_no, line in enumerate(lines, start=1):
            tokens = line.split()
            if not tokens:
                continue
            if tokens[0] in SECTIONS:
                section = SECTIONS[tokens[0]]
                continue
            if section is None:
                continue

            try:
                values = [int(token) for token in tokens[1:]]
            except ValueError:
                # Trailing text such as "the end" closes the data sections
                section = None
                continue

            if section == 'required_nodes':
                if len(values) < 2:
                    raise InvalidInstanceError(f"{self.file_path.name}:{line_no}: malformed node row")
                try:
                    node = int(tokens[0].lstrip('Nn')) - 1
                except ValueError:
                    raise InvalidInstanceError(
                        f"{self.file_path.name}:{line_no}: malformed node id '{tokens[0]}'"
                    ) from None
                demand, service_cost = values[0], values[1]
                network.set_required_node(node)
                catalog.add_service(service_id, ServiceKind.NODE, node, node, demand, service_cost, 0)
                service_id += 1
            elif section in ('required_edges', 'required_arcs'):
                if len(values) < 5:
                    raise InvalidInstanceError(f"{self.file_path.name}:{line_no}: malformed link row")
                u, v, travel_cost, demand, service_cost = values[:5]
                directed = section == 'required_arcs'
                network.add_connection(u - 1, v - 1, travel_cost, directed=directed, required=True)
                kind = ServiceKind.ARC if directed else ServiceKind.EDGE
                catalog.add_service(service_id, kind, u - 1, v - 1, demand, service_cost, travel_cost)
                service_id += 1
            else:
                if len(values) < 3:
                    raise InvalidInstanceError(f"{self.file_path.name}:{line_no}: malformed link row")
                u, v, travel_cost = values[:3]
                network.add_connection(u - 1, v - 1, travel_cost, directed=section == 'arcs')
