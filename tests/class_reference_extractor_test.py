import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from core.class_reference_extractor import extract_referenced_classes, referenced_names
from core.config import DetectorConfig
from core.errors import ParseError
from core.jsx_treesitter_parser import iter_class_attribute_expressions, normalize_expression, parse_tsx
from core.reference_shapes import (
    DirectAccess,
    LogicalShortCircuit,
    TemplateInterpolation,
    TemplateLiteral,
    Ternary,
    Unrecognized,
)

def component(jsx, imports="import styles from './Component.module.scss';"):
    return f"""
    import React from 'react';
    {imports}
    export default function Component({{ condition, other }}) {{
        return {jsx};
    }}
    """

def shape_of(jsx):
    tree = parse_tsx(component(jsx))
    return normalize_expression(next(iter_class_attribute_expressions(tree.root_node, ['className'])))

# Shape normalization

def test_member_access_shape():
    assert shape_of('<div className={styles.button}></div>') == DirectAccess('styles', 'button')

def test_ternary_shape():
    assert shape_of('<div className={condition ? styles.a : styles.b} />') == \
        Ternary(DirectAccess('styles', 'a'), DirectAccess('styles', 'b'))

def test_logical_shape():
    assert shape_of('<div className={condition && styles.a} />') == \
        LogicalShortCircuit('&&', Unrecognized('identifier'), DirectAccess('styles', 'a'))

def test_template_shape_keeps_literal_segments():
    shape = shape_of('<div className={`${styles.a} box ${styles.b}`} />')
    assert shape == TemplateInterpolation((
        DirectAccess('styles', 'a'),
        TemplateLiteral(' box '),
        DirectAccess('styles', 'b'),
    ))

def test_call_is_unrecognized():
    assert isinstance(shape_of('<div className={clsx(styles.a)} />'), Unrecognized)

# Evaluation over hand-built shapes

def test_referenced_names_direct_access():
    assert referenced_names(DirectAccess('styles', 'a'), {'styles'}) == {'a'}
    assert referenced_names(DirectAccess('theme', 'a'), {'styles'}) == set()

def test_referenced_names_nested_shapes():
    shape = TemplateInterpolation((
        Ternary(DirectAccess('styles', 'a'), LogicalShortCircuit('||', DirectAccess('styles', 'b'),
                                                                 Unrecognized('call_expression'))),
        TemplateLiteral(' '),
        DirectAccess('styles', 'c'),
    ))
    assert referenced_names(shape, {'styles'}) == {'a', 'b', 'c'}

def test_referenced_names_depth_limit():
    shape = DirectAccess('styles', 'deep')
    for _ in range(200):
        shape = Ternary(shape, Unrecognized('identifier'))
    assert referenced_names(shape, {'styles'}) == set()

def test_referenced_names_rejects_non_shapes():
    with pytest.raises(TypeError):
        referenced_names('styles.a', {'styles'})

# End to end on TSX source

def test_single_class_usage():
    assert extract_referenced_classes(component('<div className={styles.button}></div>')) == {'button'}

def test_conditional_expression():
    src = component('<div className={condition ? styles.button : styles.otherButton}></div>')
    assert extract_referenced_classes(src) == {'button', 'otherButton'}

def test_logical_expressions():
    src = component('<div><a className={condition && styles.button} /><b className={other || styles.link} />'
                    '<i className={other ?? styles.icon} /></div>')
    assert extract_referenced_classes(src) == {'button', 'link', 'icon'}

def test_template_literal_single_class():
    assert extract_referenced_classes(component('<div className={`${styles.button}`}></div>')) == {'button'}

def test_template_literal_multiple_classes():
    src = component('<div className={`${styles.button} ${styles.tablet600pxButton}`}></div>')
    assert extract_referenced_classes(src) == {'button', 'tablet600pxButton'}

def test_ternary_inside_template_literal():
    src = component('<div className={`${condition ? styles.button : styles.otherButton} ${styles.additionalClass}`}></div>')
    assert extract_referenced_classes(src) == {'button', 'otherButton', 'additionalClass'}

def test_parenthesized_and_optional_access():
    src = component('<div className={(condition ? (styles.a) : styles?.b)} />')
    assert extract_referenced_classes(src) == {'a', 'b'}

def test_bracket_access_with_literal_key():
    src = component("<div className={styles['kebab-case']} />")
    assert extract_referenced_classes(src) == {'kebab-case'}

def test_unresolved_shapes_contribute_nothing():
    src = component('<div><a className={styles[other]} /><b className={clsx(styles.a)} />'
                    '<i className={other.a} /><p className="plain" /></div>')
    assert extract_referenced_classes(src) == set()

def test_class_attribute_and_other_attributes():
    src = component('<div class={styles.a} id={styles.notAClass} data-x={styles.alsoNot} />')
    assert extract_referenced_classes(src) == {'a'}

def test_style_import_under_another_name():
    src = component('<div className={s.box} />', imports="import s from './Box.module.scss';")
    assert extract_referenced_classes(src) == {'box'}

def test_namespace_import():
    src = component('<div className={css.box} />', imports="import * as css from './Box.module.css';")
    assert extract_referenced_classes(src) == {'box'}

def test_import_resolution_can_be_disabled():
    src = component('<div className={s.box} />', imports="import s from './Box.module.scss';")
    config = DetectorConfig(resolve_style_imports=False)
    assert extract_referenced_classes(src, config=config) == set()
    assert extract_referenced_classes(src, namespaces=['s'], config=config) == {'box'}

def test_typescript_wrappers_are_transparent():
    src = component('<div className={styles.a! as string} />')
    assert extract_referenced_classes(src) == {'a'}

def test_union_across_attributes_and_idempotent():
    src = component("""(
        <div className={styles.root}>
            <span className={styles.label}>{condition && <b className={styles.badge} />}</span>
        </div>
    )""")
    first = extract_referenced_classes(src)
    assert first == {'root', 'label', 'badge'}
    assert extract_referenced_classes(src) == first

def test_unterminated_tag_raises_parse_error():
    src = """
    import styles from './Component.module.scss';
    export default function Component() {
        return <div className={styles.a}
    """
    with pytest.raises(ParseError) as excinfo:
        extract_referenced_classes(src)
    assert excinfo.value.line is not None

def test_bracket_key_with_escape_sequence_is_not_resolved():
    src = component("<div className={styles['k\\'b']} />")
    assert extract_referenced_classes(src) == set()
