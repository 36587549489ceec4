from abc import ABC, abstractmethod
from typing import Dict, Any


class IContentProbe(ABC):
    @abstractmethod
    async def probe(self, file_path: str) -> Dict[str, Any]:
        """{'success': bool, 'data': StreamGeometry, 'error': str}"""
        pass


class IRemuxer(ABC):
    @abstractmethod
    async def remux(self, file_path: str) -> Dict[str, Any]:
        """{'success': bool, 'data': {'output_path', 'size'}, 'error': str}"""
        pass
