"""
Training flow (one run = one experiment)

    ClusterInit → DatasetImport → DatasetSplit
        → ModelTrain (each configured model)
        → ModelEvaluate → ModelReport → VarImpPlot
        → ModelCompare → ArtifactPersist

Tree building, the distributed frame and scoring all live inside the H2O
engine. This package only sequences the calls, validates what goes in and
records what comes out.
"""
