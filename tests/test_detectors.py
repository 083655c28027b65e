#!/usr/bin/env python3
"""
Tests for the token-pattern detectors.
"""

from forge_coach.constraints import tokenize, strip_comments_and_strings
from forge_coach.constraints import detectors as d
from forge_coach.constraints.tokenizer import token_texts


def toks(source):
    return token_texts(tokenize(strip_comments_and_strings(source)))


class TestTaskDetection:
    """Concurrency Task vs a user type named Task"""

    def test_user_struct_named_task(self):
        assert not d.has_task_usage(toks("struct Task {}"))

    def test_task_in_type_position(self):
        assert d.has_task_usage(toks("let job: Task = make()"))

    def test_task_closure(self):
        assert d.has_task_usage(toks("Task { await run() }"))

    def test_task_generic(self):
        assert d.has_task_usage(toks("let handle: Task<Int, Never>"))
        assert d.has_task_usage(toks("var handles = [Task<Int, Never>]()"))

    def test_task_initializer(self):
        assert d.has_task_usage(toks("let handle = Task(priority: .high) { }"))

    def test_task_in_comment_or_string(self):
        assert not d.has_task_usage(toks('// Task { }\nlet s = "Task {"'))


class TestClosureDetection:
    """for-in loops are not closures"""

    def test_for_loop_is_not_closure(self):
        assert not d.has_closure_token(toks("for value in [1, 2, 3] { print(value) }"))

    def test_nested_for_loop_is_not_closure(self):
        assert not d.has_closure_token(toks("func f() { for x in xs { print(x) } }"))

    def test_trailing_closure_with_params(self):
        assert d.has_closure_token(toks("items.forEach { item in print(item) }"))

    def test_closure_nested_inside_function_body(self):
        source = "func f() { let a = 1\n items.forEach { item in print(item) } }"
        assert d.has_closure_token(toks(source))

    def test_closure_stored_in_variable(self):
        assert d.has_closure_token(toks("let inc = { value in value + 1 }"))

    def test_closure_assignment(self):
        assert d.has_closure_assignment(toks("let add = { (a: Int) in a + 1 }"))
        assert d.has_closure_assignment(toks("func make() -> () -> Int { return { 1 } }"))

    def test_shorthand_args(self):
        assert d.has_shorthand_closure_arg(toks("xs.map { $0 * 2 }"))
        assert not d.has_shorthand_closure_arg(toks("let $value = 1"))

    def test_closure_usage_combines(self):
        assert d.has_closure_usage(toks("xs.sorted { $0 < $1 }"))
        assert not d.has_closure_usage(toks("let x = 1"))


class TestGenericDetection:
    """Generic syntax in declaration headers only"""

    def test_generic_function(self):
        assert d.has_generic_definition(toks("func first<T>(_ xs: [T]) -> T? { nil }"))

    def test_where_on_extension(self):
        assert d.has_generic_definition(toks("extension Array where Element == Int { }"))

    def test_case_where_in_body(self):
        source = "func g() { switch x { case .a where ready: break\n default: break } }"
        assert not d.has_generic_definition(toks(source))

    def test_less_than_in_body(self):
        assert not d.has_generic_definition(toks("func f(x: Int) -> Bool { return x < 3 }"))

    def test_too_short(self):
        assert not d.has_generic_definition(toks("a<b"))


class TestTupleDetection:
    """Tuples need a comma at depth one after an anchor"""

    def test_tuple_literal(self):
        assert d.has_tuple_usage(toks("let pair = (1, 2)"))

    def test_tuple_return_type(self):
        assert d.has_tuple_usage(toks("func f() -> (Int, Int) { return (1, 2) }"))

    def test_call_arguments_are_not_tuples(self):
        assert not d.has_tuple_usage(toks("print(1, 2)"))

    def test_grouping_parens(self):
        assert not d.has_tuple_usage(toks("let x = (a + b) * 2"))

    def test_nested_comma_is_not_top_level(self):
        assert not d.has_tuple_usage(toks("let x = (max(a, b))"))


class TestOptionalAndCollectionDetection:

    def test_optional_type(self):
        assert d.has_optional_type(toks("var name: String?"))
        assert d.has_optional_type(toks("func f() -> Int? { nil }"))

    def test_ternary_is_not_optional_type(self):
        assert not d.has_optional_type(toks("let a = b ? c : e"))

    def test_optional_usage_forms(self):
        assert d.has_optional_usage(toks("let a = b ?? 0"))
        assert d.has_optional_usage(toks("if let a = b { }"))
        assert d.has_optional_usage(toks("guard let a = b else { return }"))
        assert d.has_optional_usage(toks("let a = b as? Int"))
        assert not d.has_optional_usage(toks("let value = 1"))

    def test_collection_literal(self):
        assert d.has_collection_usage(toks("let xs = [1, 2]"))
        assert d.has_collection_usage(toks("let m: [String: Int] = [:]"))
        assert d.has_collection_usage(toks("var s = Set<Int>()"))

    def test_capture_list_is_not_collection(self):
        assert not d.has_collection_usage(toks("run { [weak self] in self?.go() }"))

    def test_no_collection(self):
        assert not d.has_collection_usage(toks("let n = 5"))


class TestProtocolDetection:

    def test_conformance(self):
        assert d.has_protocol_conformance(toks("struct Point: Equatable { }"))

    def test_stdlib_bases_ignored(self):
        assert not d.has_protocol_conformance(toks("enum Suit: String { case a }"))
        assert not d.has_protocol_conformance(toks("enum Failure: Int, Error { case a }"))

    def test_protocol_extension(self):
        source = "protocol Shape { }\nextension Shape { func area() -> Int { 0 } }"
        assert d.has_protocol_extension(toks(source))

    def test_extension_of_unknown_type(self):
        assert not d.has_protocol_extension(toks("protocol Shape { }\nextension Int { }"))

    def test_dependency_injection(self):
        source = "protocol Store { func load() -> Int }\nstruct Service {\n let store: any Store\n}"
        assert d.has_dependency_injection(toks(source))

    def test_local_existential_is_not_injection(self):
        source = "protocol Store { }\nfunc run() { let store: any Store = Disk() }"
        assert not d.has_dependency_injection(toks(source))

    def test_mocking(self):
        assert d.has_protocol_mocking(toks("protocol Clock { }\nstruct MockClock: Clock { }"))
        assert not d.has_protocol_mocking(toks("protocol Clock { }\nstruct MockClock { }"))
        assert not d.has_protocol_mocking(toks("protocol Clock { }\nstruct FakeClock: Clock { }"))


class TestMiscDetectors:

    def test_property_wrapper(self):
        assert d.has_property_wrapper_usage(toks("@State var count = 0"))
        assert not d.has_property_wrapper_usage(toks("@MainActor func update() { }"))

    def test_macros_and_build_configs(self):
        assert d.has_macro_usage(toks("#Preview { }"))
        assert d.has_build_configs(toks("#if DEBUG\nprint(1)\n#endif"))
        assert not d.has_build_configs(toks("let x = 1"))

    def test_projected_values(self):
        assert d.has_projected_values(toks("Toggle(isOn: $enabled)"))
        assert not d.has_projected_values(toks("xs.map { $0 }"))

    def test_file_io(self):
        assert d.has_file_io(toks("let fm = FileManager.default"))
        assert d.has_file_io(toks('let text = try String(contentsOfFile: path)'))
        assert d.has_file_io(toks("let data = Data(contentsOf: url)"))
        assert not d.has_file_io(toks("let data = Data()"))

    def test_network(self):
        assert d.has_network_usage([], 'let u = URL(string: "https://example.com")')
        assert d.has_network_usage(toks("let s = URLSession.shared"), "")
        assert not d.has_network_usage(toks("let x = 1"), "let x = 1")

    def test_concurrency(self):
        assert d.has_concurrency_usage(toks("func f() async { }"))
        assert d.has_concurrency_usage(toks("actor Bank { }"))
        assert not d.has_concurrency_usage(toks("struct Task { }"))

    def test_access_control(self):
        assert d.has_access_control_setter(toks("private(set) var count = 0"))
        assert d.has_access_control_open(toks("public func f() { }"))
        assert not d.has_access_control_keyword(toks("func f() { }"))

    def test_error_handling(self):
        assert d.has_error_type(toks("enum Failure: Error { case bad }"))
        assert d.has_error_type(toks("func f() -> Result<Int, Failure>"))
        assert d.has_throwing_function(toks("func f() throws { }"))
        assert d.has_do_try_catch(toks("do { try f() } catch { }"))
        assert d.has_try_optional(toks("let x = try? f()"))
        assert d.has_try_force(toks("let x = try! f()"))

    def test_operators(self):
        assert d.has_comparison_operator(toks("a <= b"))
        assert d.has_logical_operator(toks("a && b"))
        assert d.has_compound_assignment(toks("total += 1"))
        assert not d.has_compound_assignment(toks("total = total + 1"))

    def test_swiftpm(self):
        assert d.has_swiftpm_basics(toks("import PackageDescription\nlet package = Package(name: \"x\")"))
        assert d.has_swiftpm_dependencies(toks("dependencies: [.package(url: u, from: v)]"))

    def test_command_line_arguments(self):
        assert d.has_command_line_arguments(toks("let args = CommandLine.arguments"))
        assert d.has_command_line_arguments(toks("ProcessInfo.processInfo.arguments"))

    def test_sequence_helpers(self):
        assert d.has_sequence(['a', 'b', 'c'], ['b', 'c'])
        assert not d.has_sequence(['a', 'b'], ['b', 'c'])
        assert not d.has_sequence(['a'], [])
        assert d.has_dot_member(toks("xs.filter { $0 > 1 }"), 'filter')
