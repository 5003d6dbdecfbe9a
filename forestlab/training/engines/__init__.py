"""
Training engines

Engines wrap exactly one concern of the H2O call surface:

- cluster_engine      : h2o.init / cluster shutdown
- dataset_engine      : import_file / asfactor / split_frame
- model/*             : estimator construction + train()
- model_report_engine : predict / accuracy / hit ratios / varimp

Steps reach h2o through engines (ArtifactPersistStep calls save_model
itself); engines never touch the TrainingContext.
"""
