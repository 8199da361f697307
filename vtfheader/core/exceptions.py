class VTFError(Exception):
    """Base class for VTF decode failures"""
    error_code = "PARSE_3000"


class TruncatedInputError(VTFError):
    """Fewer bytes remain than a read requires"""
    error_code = "PARSE_3006"

    def __init__(self, requested: int, available: int, offset: int):
        self.requested = requested
        self.available = available
        self.offset = offset
        super().__init__(
            f"Unexpected end of data at offset {offset}: "
            f"needed {requested} bytes, {available} available"
        )


class InvalidSignatureError(VTFError):
    """Leading bytes do not match the VTF magic"""
    error_code = "PARSE_3001"

    def __init__(self, signature: bytes):
        self.signature = signature
        super().__init__(
            f"File is not a valid VTF, signature {signature!r} did not match"
        )


class InvalidResourceCountError(VTFError):
    """Resource count is negative or larger than the data can hold"""
    error_code = "PARSE_3007"

    def __init__(self, count: int, reason: str):
        self.count = count
        super().__init__(f"Invalid resource count {count}: {reason}")


class InvalidResourceOffsetError(VTFError):
    """KVD offset points outside the stream"""
    error_code = "PARSE_3008"

    def __init__(self, offset: int, skip: int, remaining: int):
        self.offset = offset
        self.skip = skip
        super().__init__(
            f"Invalid resource offset {offset}: skip of {skip} bytes "
            f"with {remaining} bytes remaining"
        )
