class InferenceAdapter:
    async def verify(self, body: dict) -> dict:
        """POST /verify. Returns the 200 payload; raises TransportError / ServiceError."""
        raise NotImplementedError

    async def analyze(self, body: dict) -> dict:
        """POST /analyze. Returns the 200 payload; raises TransportError / ServiceError."""
        raise NotImplementedError

    async def ping(self) -> bool:
        return True

    async def aclose(self):
        pass
