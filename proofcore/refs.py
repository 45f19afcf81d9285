"""Integer references into the directory arenas.

Everything in a resolved document is addressed by its position in the
arena that owns it.  Global refs index the ``Directory``; ``VariableRef``
indexes the local scope of the enclosing axiom, theorem or definition.
"""

from typing import NewType

SystemRef = NewType("SystemRef", int)
TypeRef = NewType("TypeRef", int)
SymbolRef = NewType("SymbolRef", int)
DefinitionRef = NewType("DefinitionRef", int)
VariableRef = NewType("VariableRef", int)
AxiomRef = NewType("AxiomRef", int)
TheoremRef = NewType("TheoremRef", int)
ProofRef = NewType("ProofRef", int)
