"""
C#-specific naming utilities.

Escapes identifiers that collide with C# keywords.
"""

CSHARP_RESERVED_WORDS = {
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch",
    "char", "checked", "class", "const", "continue", "decimal", "default",
    "delegate", "do", "double", "else", "enum", "event", "explicit",
    "extern", "false", "finally", "fixed", "float", "for", "foreach",
    "goto", "if", "implicit", "in", "int", "interface", "internal", "is",
    "lock", "long", "namespace", "new", "null", "object", "operator",
    "out", "override", "params", "private", "protected", "public",
    "readonly", "ref", "return", "sbyte", "sealed", "short", "sizeof",
    "stackalloc", "static", "string", "struct", "switch", "this", "throw",
    "true", "try", "typeof", "uint", "ulong", "unchecked", "unsafe",
    "ushort", "using", "virtual", "void", "volatile", "while",
}


def escape_identifier(name: str) -> str:
    """Prefix C# keywords with @ so they can be used as identifiers."""
    if name in CSHARP_RESERVED_WORDS:
        return f"@{name}"
    return name


def class_name_of(filename: str) -> str:
    """"NorthwindEfContext.cs" -> "NorthwindEfContext"."""
    if filename.endswith(".cs"):
        return filename[: -len(".cs")]
    return filename
