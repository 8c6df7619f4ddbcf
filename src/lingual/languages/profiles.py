"""
Target Language Profiles
========================

Declarative data for the supported targets: which middleware passes each
one needs and how it bridges the standard library.

| Target     | Middleware                                    |
|------------|-----------------------------------------------|
| javascript | variable-renamer, hoister                     |
| typescript | variable-renamer, type-checker, hoister       |
| python     | variable-renamer, hoister                     |
| csharp     | variable-renamer, type-checker                |
| gdscript   | variable-renamer, hoister                     |
"""

from lingual.languages.base import FunctionMapping, LanguageProfile, PropertyMapping

# =============================================================================
# JavaScript / TypeScript
# =============================================================================

_ECMASCRIPT_FUNCTIONS = (
    FunctionMapping("http.get", "await fetch({args})", is_async=True),
    FunctionMapping(
        "http.post",
        'await fetch({args[0]}, { method: "POST", body: {args[1]} })',
        is_async=True,
    ),
    FunctionMapping("console.log", "console.log({args})"),
    FunctionMapping("console.error", "console.error({args})"),
    FunctionMapping("console.warn", "console.warn({args})"),
    FunctionMapping("Math.random", "Math.random()"),
    FunctionMapping("Math.floor", "Math.floor({args})"),
    FunctionMapping("Math.ceil", "Math.ceil({args})"),
)

_ECMASCRIPT_PROPERTIES = (
    PropertyMapping("response.json", "{object}.json", is_method=True),
    PropertyMapping("data.drivers", "{object}.drivers"),
    PropertyMapping("data.length", "{object}.length"),
)

JAVASCRIPT = LanguageProfile(
    name="javascript",
    display_name="JavaScript",
    description="ECMAScript JavaScript programming language",
    file_extension=".js",
    middleware_dependencies=("variable-renamer", "hoister"),
    function_mappings=_ECMASCRIPT_FUNCTIONS,
    property_mappings=_ECMASCRIPT_PROPERTIES,
)

TYPESCRIPT = LanguageProfile(
    name="typescript",
    display_name="TypeScript",
    description="Microsoft TypeScript programming language",
    file_extension=".ts",
    middleware_dependencies=("variable-renamer", "type-checker", "hoister"),
    function_mappings=_ECMASCRIPT_FUNCTIONS,
    property_mappings=_ECMASCRIPT_PROPERTIES,
)

# =============================================================================
# Python
# =============================================================================

PYTHON = LanguageProfile(
    name="python",
    display_name="Python",
    description="Python programming language",
    file_extension=".py",
    middleware_dependencies=("variable-renamer", "hoister"),
    function_mappings=(
        FunctionMapping(
            "http.get",
            "await aiohttp.ClientSession().get({args})",
            is_async=True,
            imports=("import aiohttp", "import asyncio"),
        ),
        FunctionMapping(
            "http.post",
            "await aiohttp.ClientSession().post({args[0]}, json={args[1]})",
            is_async=True,
            imports=("import aiohttp", "import asyncio"),
        ),
        FunctionMapping("console.log", "print({args})"),
        FunctionMapping("console.error", "print({args}, file=sys.stderr)", imports=("import sys",)),
        FunctionMapping(
            "console.warn",
            'print(f"WARNING: {args}", file=sys.stderr)',
            imports=("import sys",),
        ),
        FunctionMapping("Math.random", "random.random()", imports=("import random",)),
        FunctionMapping("Math.floor", "math.floor({args})", imports=("import math",)),
        FunctionMapping("Math.ceil", "math.ceil({args})", imports=("import math",)),
    ),
    property_mappings=(
        PropertyMapping("response.json", "await {object}.json", is_method=True),
        PropertyMapping("data.drivers", '{object}.get("drivers")'),
        PropertyMapping("data.length", "len({object})"),
    ),
)

# =============================================================================
# C#
# =============================================================================

CSHARP = LanguageProfile(
    name="csharp",
    display_name="C#",
    description="Microsoft C# programming language",
    file_extension=".cs",
    middleware_dependencies=("variable-renamer", "type-checker"),
    function_mappings=(
        FunctionMapping(
            "http.get",
            "await new HttpClient().GetAsync({args})",
            is_async=True,
            imports=("System.Net.Http",),
        ),
        FunctionMapping(
            "http.post",
            "await new HttpClient().PostAsync({args[0]}, new StringContent({args[1]}))",
            is_async=True,
            imports=("System.Net.Http",),
        ),
        FunctionMapping("console.log", "Console.WriteLine({args})", imports=("System",)),
        FunctionMapping("console.error", "Console.Error.WriteLine({args})", imports=("System",)),
        FunctionMapping("console.warn", "Console.WriteLine({args})", imports=("System",)),
        FunctionMapping("Math.random", "new Random().NextDouble()", imports=("System",)),
        FunctionMapping("Math.floor", "Math.Floor({args})", imports=("System",)),
        FunctionMapping("Math.ceil", "Math.Ceiling({args})", imports=("System",)),
    ),
    property_mappings=(
        PropertyMapping("response.json", "{object}.Content.ReadAsStringAsync", is_method=True),
        PropertyMapping("data.drivers", '{object}.GetProperty("drivers")'),
        PropertyMapping("data.length", "{object}.GetArrayLength()"),
    ),
)

# =============================================================================
# GDScript
# =============================================================================

GDSCRIPT = LanguageProfile(
    name="gdscript",
    display_name="GDScript",
    description="Godot Engine GDScript programming language",
    file_extension=".gd",
    middleware_dependencies=("variable-renamer", "hoister"),
    function_mappings=(
        FunctionMapping("http.get", "await HTTPRequest.new().request({args})", is_async=True),
        FunctionMapping(
            "http.post",
            'await HTTPRequest.new().request({args[0]}, ["Content-Type: application/json"], '
            "HTTPClient.METHOD_POST, {args[1]})",
            is_async=True,
        ),
        FunctionMapping("console.log", "print({args})"),
        FunctionMapping("console.error", "printerr({args})"),
        FunctionMapping("console.warn", "print_warning({args})"),
        FunctionMapping("Math.random", "randf()"),
        FunctionMapping("Math.floor", "floor({args})"),
        FunctionMapping("Math.ceil", "ceil({args})"),
    ),
    property_mappings=(
        PropertyMapping(
            "response.json",
            "JSON.parse_string({object}.get_response_body().get_string_from_utf8())",
        ),
        PropertyMapping("data.drivers", "{object}.drivers"),
        PropertyMapping("data.length", "{object}.size()"),
    ),
)

PROFILES: dict[str, LanguageProfile] = {
    profile.name: profile
    for profile in (JAVASCRIPT, TYPESCRIPT, PYTHON, CSHARP, GDSCRIPT)
}
